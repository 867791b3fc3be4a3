import asyncio

from loguru import logger

from hospital.store.ports import AbstractCollectionStore, StoreConnectionProtocol


class EntityStore:
    """The process-wide store handle shared by every request handler.

    Bundles the four hospital collections and the separate user
    collection with the connection they all run on.
    """

    def __init__(
        self,
        connection: StoreConnectionProtocol,
        *,
        patients: AbstractCollectionStore,
        doctors: AbstractCollectionStore,
        appointments: AbstractCollectionStore,
        departments: AbstractCollectionStore,
        users: AbstractCollectionStore,
    ) -> None:
        self._connection = connection
        self.patients = patients
        self.doctors = doctors
        self.appointments = appointments
        self.departments = departments
        self.users = users

    async def health_check(self, *, deadline: float | None = None) -> bool:
        """Ping the database, giving up at ``deadline`` (event-loop time) when given."""
        try:
            if deadline is None:
                await self._connection.ping()
            else:
                async with asyncio.timeout_at(deadline):
                    await self._connection.ping()
            return True
        except Exception as exc:
            logger.warning("Entity store health check failed: {}", exc)
            return False

    async def close(self) -> None:
        await self._connection.close()
