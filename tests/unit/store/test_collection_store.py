import asyncio

import pytest

from hospital.domain.exceptions import (
    ConstraintViolationError,
    RecordNotFoundError,
    StoreUnavailableError,
)
from hospital.store.adapters.memory import InMemoryCollection
from hospital.store.collection import CollectionStore


@pytest.fixture
def collection() -> InMemoryCollection:
    return InMemoryCollection("patients", unique_fields=("email",))


@pytest.fixture
def patients(collection: InMemoryCollection) -> CollectionStore:
    return CollectionStore(collection, timeout=0.2)


class TestInsert:
    @pytest.mark.asyncio
    async def test_returns_assigned_id(
        self, patients: CollectionStore, collection: InMemoryCollection
    ) -> None:
        record_id = await patients.insert({"name": "A", "email": "a@x.com"})

        assert record_id
        assert collection.documents == [{"name": "A", "email": "a@x.com", "id": record_id}]

    @pytest.mark.asyncio
    async def test_ids_are_never_reused(self, patients: CollectionStore) -> None:
        ids = {await patients.insert({"name": "A", "email": f"{i}@x.com"}) for i in range(20)}

        assert len(ids) == 20

    @pytest.mark.asyncio
    async def test_duplicate_email_raises_constraint_violation(
        self, patients: CollectionStore
    ) -> None:
        await patients.insert({"name": "A", "email": "a@x.com"})

        with pytest.raises(ConstraintViolationError, match="email"):
            await patients.insert({"name": "B", "email": "a@x.com"})

    @pytest.mark.asyncio
    async def test_concurrent_duplicates_admit_exactly_one(
        self, patients: CollectionStore, collection: InMemoryCollection
    ) -> None:
        results = await asyncio.gather(
            patients.insert({"name": "A", "email": "a@x.com"}),
            patients.insert({"name": "B", "email": "a@x.com"}),
            return_exceptions=True,
        )

        errors = [r for r in results if isinstance(r, Exception)]
        assert len(errors) == 1
        assert isinstance(errors[0], ConstraintViolationError)
        assert len(collection.documents) == 1

    @pytest.mark.asyncio
    async def test_wraps_unexpected_error_as_unavailable(
        self, patients: CollectionStore, collection: InMemoryCollection
    ) -> None:
        collection.insert_error = RuntimeError("connection reset")

        with pytest.raises(StoreUnavailableError, match="connection reset"):
            await patients.insert({"name": "A", "email": "a@x.com"})

    @pytest.mark.asyncio
    async def test_propagates_unavailable_directly(
        self, patients: CollectionStore, collection: InMemoryCollection
    ) -> None:
        collection.insert_error = StoreUnavailableError("primary stepped down")

        with pytest.raises(StoreUnavailableError, match="primary stepped down"):
            await patients.insert({"name": "A", "email": "a@x.com"})


class TestFind:
    @pytest.mark.asyncio
    async def test_empty_collection_returns_empty_list(self, patients: CollectionStore) -> None:
        assert await patients.find() == []

    @pytest.mark.asyncio
    async def test_no_filter_returns_everything(self, patients: CollectionStore) -> None:
        await patients.insert({"name": "A", "email": "a@x.com"})
        await patients.insert({"name": "B", "email": "b@x.com"})

        result = await patients.find()

        assert [d["name"] for d in result] == ["A", "B"]

    @pytest.mark.asyncio
    async def test_filters_by_field(self, patients: CollectionStore) -> None:
        await patients.insert({"name": "A", "email": "a@x.com"})
        await patients.insert({"name": "B", "email": "b@x.com"})

        result = await patients.find({"name": "B"})

        assert [d["email"] for d in result] == ["b@x.com"]


class TestFindOne:
    @pytest.mark.asyncio
    async def test_finds_by_id(self, patients: CollectionStore) -> None:
        record_id = await patients.insert({"name": "A", "email": "a@x.com"})

        document = await patients.find_one({"id": record_id})

        assert document["name"] == "A"

    @pytest.mark.asyncio
    async def test_miss_raises_not_found(self, patients: CollectionStore) -> None:
        with pytest.raises(RecordNotFoundError, match="patients"):
            await patients.find_one({"id": "missing"})


class TestDeadline:
    @pytest.mark.asyncio
    async def test_slow_call_times_out_as_unavailable(
        self, patients: CollectionStore, collection: InMemoryCollection
    ) -> None:
        collection.delay = 5.0

        with pytest.raises(StoreUnavailableError, match="timed out"):
            await patients.find()

    @pytest.mark.asyncio
    async def test_abandoned_insert_writes_nothing(
        self, patients: CollectionStore, collection: InMemoryCollection
    ) -> None:
        collection.delay = 5.0

        with pytest.raises(StoreUnavailableError):
            await patients.insert({"name": "A", "email": "a@x.com"})

        assert collection.documents == []

    @pytest.mark.asyncio
    async def test_explicit_deadline_overrides_default_timeout(
        self, collection: InMemoryCollection
    ) -> None:
        patients = CollectionStore(collection, timeout=60.0)
        collection.delay = 5.0
        deadline = asyncio.get_running_loop().time() + 0.05

        with pytest.raises(StoreUnavailableError, match="timed out"):
            await patients.find_one({"id": "x"}, deadline=deadline)

    @pytest.mark.asyncio
    async def test_past_deadline_fails_immediately(
        self, patients: CollectionStore, collection: InMemoryCollection
    ) -> None:
        collection.delay = 0.01
        deadline = asyncio.get_running_loop().time() - 1

        with pytest.raises(StoreUnavailableError):
            await patients.insert({"name": "A", "email": "a@x.com"}, deadline=deadline)
