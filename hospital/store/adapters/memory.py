import asyncio
import copy
from typing import Any

from bson import ObjectId

from hospital.domain.exceptions import ConstraintViolationError


class InMemoryCollection:
    """In-process implementation of the DocumentCollectionProtocol protocol.

    Used as the ``memory`` store adapter and as a test double. Pre-load
    ``documents`` to control what lookups return. Set ``insert_error``,
    ``find_error`` or ``find_one_error`` to make the corresponding method
    raise, or ``delay`` to make every call sleep first.
    """

    def __init__(self, name: str, *, unique_fields: tuple[str, ...] = ()) -> None:
        self._name = name
        self._unique_fields = unique_fields
        self.documents: list[dict[str, Any]] = []
        self.delay: float = 0.0

        self.insert_error: Exception | None = None
        self.find_error: Exception | None = None
        self.find_one_error: Exception | None = None

    @property
    def name(self) -> str:
        return self._name

    async def insert_one(self, document: dict[str, Any]) -> str:
        await self._maybe_wait()
        if self.insert_error:
            raise self.insert_error

        for field in self._unique_fields:
            value = document.get(field)
            if any(existing.get(field) == value for existing in self.documents):
                raise ConstraintViolationError(
                    self._name, f"duplicate key on index {field}_1: {field}={value!r}"
                )
        record_id = str(ObjectId())
        self.documents.append({**copy.deepcopy(document), "id": record_id})
        return record_id

    async def find(self, filter_: dict[str, Any]) -> list[dict[str, Any]]:
        await self._maybe_wait()
        if self.find_error:
            raise self.find_error
        return [copy.deepcopy(d) for d in self.documents if _matches(d, filter_)]

    async def find_one(self, filter_: dict[str, Any]) -> dict[str, Any] | None:
        await self._maybe_wait()
        if self.find_one_error:
            raise self.find_one_error
        for document in self.documents:
            if _matches(document, filter_):
                return copy.deepcopy(document)
        return None

    async def _maybe_wait(self) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)


class InMemoryConnection:
    """Connection stand-in for the in-memory adapter."""

    def __init__(self) -> None:
        self.closed: bool = False
        self.delay: float = 0.0
        self.ping_error: Exception | None = None

    async def ping(self) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.ping_error:
            raise self.ping_error

    async def close(self) -> None:
        self.closed = True


def _matches(document: dict[str, Any], filter_: dict[str, Any]) -> bool:
    return all(document.get(key) == value for key, value in filter_.items())
