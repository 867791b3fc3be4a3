from abc import ABC, abstractmethod
from typing import Any, Protocol


class AbstractCollectionStore(ABC):
    """Abstract base class for operations on one entity collection.

    Every method accepts an optional ``deadline`` expressed in event-loop
    time (``loop.time()``). All calls made on behalf of one request share
    the same deadline; when it passes, the in-flight operation is cancelled.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The collection name."""

    @abstractmethod
    async def insert(self, document: dict[str, Any], *, deadline: float | None = None) -> str:
        """Insert a fully populated document.

        Args:
            document: The document to store. The store assigns no fields
                other than the identifier.
            deadline: Event-loop time after which the call is abandoned.

        Returns:
            The identifier assigned by the store.

        Raises:
            ConstraintViolationError: If a unique field is duplicated.
            StoreUnavailableError: If the store is unreachable or the deadline passes.
        """

    @abstractmethod
    async def find(
        self, filter_: dict[str, Any] | None = None, *, deadline: float | None = None
    ) -> list[dict[str, Any]]:
        """Return every document matching ``filter_`` (all documents when None).

        Returns:
            Matching documents, each carrying its ``id``. Empty list if none match.

        Raises:
            StoreUnavailableError: If the store is unreachable or the deadline passes.
        """

    @abstractmethod
    async def find_one(
        self, filter_: dict[str, Any], *, deadline: float | None = None
    ) -> dict[str, Any]:
        """Return the first document matching ``filter_``.

        Raises:
            RecordNotFoundError: If nothing matches.
            StoreUnavailableError: If the store is unreachable or the deadline passes.
        """


class DocumentCollectionProtocol(Protocol):
    """Low-level interface a database driver adapter exposes per collection.

    Filters use ``id`` for the identifier; translating it to the driver's
    own key is the adapter's job.
    """

    @property
    def name(self) -> str:
        """The collection name."""
        ...

    async def insert_one(self, document: dict[str, Any]) -> str:
        """Insert a document and return its new identifier."""
        ...

    async def find(self, filter_: dict[str, Any]) -> list[dict[str, Any]]:
        """Return all matching documents."""
        ...

    async def find_one(self, filter_: dict[str, Any]) -> dict[str, Any] | None:
        """Return the first matching document, or None."""
        ...


class StoreConnectionProtocol(Protocol):
    """The long-lived connection every collection shares."""

    async def ping(self) -> None:
        """Raise if the backing database is unreachable."""
        ...

    async def close(self) -> None:
        """Release resources."""
        ...
