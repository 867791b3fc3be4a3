import asyncio
from collections.abc import Awaitable
from contextlib import AbstractAsyncContextManager
from typing import Any, TypeVar

from loguru import logger

from hospital.domain.exceptions import (
    ConstraintViolationError,
    RecordNotFoundError,
    StoreUnavailableError,
)
from hospital.store.ports import AbstractCollectionStore, DocumentCollectionProtocol

T = TypeVar("T")

DEFAULT_TIMEOUT = 5.0


class CollectionStore(AbstractCollectionStore):
    """Collection store that delegates to a driver adapter and bounds every call.

    Each call runs inside an asyncio timeout scope: the request's shared
    deadline when one is given, otherwise ``timeout`` seconds from now.
    Overrunning cancels the driver call and surfaces as
    ``StoreUnavailableError``.
    """

    def __init__(
        self, collection: DocumentCollectionProtocol, *, timeout: float = DEFAULT_TIMEOUT
    ) -> None:
        self._collection = collection
        self._timeout = timeout

    @property
    def name(self) -> str:
        return self._collection.name

    async def insert(self, document: dict[str, Any], *, deadline: float | None = None) -> str:
        record_id = await self._bounded("insert", self._collection.insert_one(document), deadline)
        logger.info("Inserted record into {}: id={}", self.name, record_id)
        return record_id

    async def find(
        self, filter_: dict[str, Any] | None = None, *, deadline: float | None = None
    ) -> list[dict[str, Any]]:
        documents = await self._bounded("find", self._collection.find(filter_ or {}), deadline)
        logger.info("Found {} record(s) in {}", len(documents), self.name)
        return documents

    async def find_one(
        self, filter_: dict[str, Any], *, deadline: float | None = None
    ) -> dict[str, Any]:
        document = await self._bounded("find_one", self._collection.find_one(filter_), deadline)
        if document is None:
            raise RecordNotFoundError(self.name, filter_)
        return document

    def _scope(self, deadline: float | None) -> AbstractAsyncContextManager[Any]:
        if deadline is None:
            return asyncio.timeout(self._timeout)
        return asyncio.timeout_at(deadline)

    async def _bounded(self, operation: str, call: Awaitable[T], deadline: float | None) -> T:
        try:
            async with self._scope(deadline):
                return await call
        except (ConstraintViolationError, StoreUnavailableError):
            raise
        except TimeoutError as exc:
            logger.warning("{} on {} exceeded its deadline", operation, self.name)
            raise StoreUnavailableError(f"{operation} on {self.name} timed out") from exc
        except Exception as exc:
            logger.warning("{} on {} failed: {}", operation, self.name, exc)
            raise StoreUnavailableError(f"{operation} on {self.name} failed: {exc}") from exc
