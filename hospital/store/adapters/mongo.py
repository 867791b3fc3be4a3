from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from loguru import logger
from pymongo import ASCENDING, AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError, PyMongoError

from hospital.domain.exceptions import ConstraintViolationError, StoreUnavailableError


class MongoCollection:
    """DocumentCollectionProtocol adapter over a pymongo asyncio collection.

    Documents leave the adapter with ``_id`` replaced by ``id`` (the
    ObjectId as a hex string); filters on ``id`` are translated back.
    """

    def __init__(self, collection: AsyncCollection[dict[str, Any]]) -> None:
        self._collection = collection

    @property
    def name(self) -> str:
        return self._collection.name

    async def insert_one(self, document: dict[str, Any]) -> str:
        try:
            # insert_one writes _id into the dict it is given
            result = await self._collection.insert_one(dict(document))
        except DuplicateKeyError as exc:
            raise ConstraintViolationError(self.name, str(exc)) from exc
        except PyMongoError as exc:
            raise StoreUnavailableError(f"MongoDB insert into {self.name} failed: {exc}") from exc
        return str(result.inserted_id)

    async def find(self, filter_: dict[str, Any]) -> list[dict[str, Any]]:
        query = _to_query(filter_)
        if query is None:
            return []
        try:
            cursor = self._collection.find(query)
            documents = await cursor.to_list(None)
        except PyMongoError as exc:
            raise StoreUnavailableError(f"MongoDB find on {self.name} failed: {exc}") from exc
        return [_from_mongo(d) for d in documents]

    async def find_one(self, filter_: dict[str, Any]) -> dict[str, Any] | None:
        query = _to_query(filter_)
        if query is None:
            return None
        try:
            document = await self._collection.find_one(query)
        except PyMongoError as exc:
            raise StoreUnavailableError(f"MongoDB find_one on {self.name} failed: {exc}") from exc
        return _from_mongo(document) if document is not None else None


class MongoConnection:
    """Owns the process-wide AsyncMongoClient."""

    def __init__(self, uri: str, *, connect_timeout: float = 10.0) -> None:
        self._client: AsyncMongoClient[dict[str, Any]] = AsyncMongoClient(
            uri,
            tz_aware=True,
            serverSelectionTimeoutMS=int(connect_timeout * 1000),
            connectTimeoutMS=int(connect_timeout * 1000),
        )

    def collection(self, database: str, name: str) -> MongoCollection:
        return MongoCollection(self._client[database][name])

    async def ping(self) -> None:
        await self._client.admin.command("ping")

    async def ensure_unique_index(self, database: str, name: str, field: str) -> None:
        await self._client[database][name].create_index([(field, ASCENDING)], unique=True)
        logger.info("Unique index on {}.{}.{} ready", database, name, field)

    async def close(self) -> None:
        await self._client.close()
        logger.info("MongoDB client closed")


def _to_query(filter_: dict[str, Any]) -> dict[str, Any] | None:
    """Translate an ``id`` filter to ``_id``; None means nothing can match."""
    if "id" not in filter_:
        return dict(filter_)
    query = {k: v for k, v in filter_.items() if k != "id"}
    try:
        query["_id"] = ObjectId(filter_["id"])
    except (InvalidId, TypeError):
        return None
    return query


def _from_mongo(document: dict[str, Any]) -> dict[str, Any]:
    result = {k: v for k, v in document.items() if k != "_id"}
    result["id"] = str(document["_id"])
    return result
