import asyncio
from collections.abc import Awaitable
from typing import Callable

from loguru import logger

from hospital.config import AppConfig, StoreAdapter
from hospital.domain.exceptions import StoreUnavailableError
from hospital.store.adapters.memory import InMemoryCollection, InMemoryConnection
from hospital.store.adapters.mongo import MongoConnection
from hospital.store.collection import DEFAULT_TIMEOUT, CollectionStore
from hospital.store.entity_store import EntityStore

# (database attribute on MongoConfig, collection name) pairs with a unique email index
_UNIQUE_EMAIL_COLLECTIONS = (
    ("hospital_database", "patients"),
    ("hospital_database", "doctors"),
    ("users_database", "users"),
)


async def _build_mongo(config: AppConfig) -> EntityStore:
    mongo = config.mongo
    connection = MongoConnection(mongo.uri, connect_timeout=mongo.connect_timeout)

    try:
        async with asyncio.timeout(mongo.connect_timeout):
            await connection.ping()
    except Exception as exc:
        await connection.close()
        raise StoreUnavailableError(f"Could not connect to MongoDB: {exc}") from exc
    logger.info("Connected to MongoDB")

    for database_attr, name in _UNIQUE_EMAIL_COLLECTIONS:
        database = getattr(mongo, database_attr)
        try:
            async with asyncio.timeout(mongo.connect_timeout):
                await connection.ensure_unique_index(database, name, "email")
        except Exception as exc:
            logger.error("Error creating {} email index: {}", name, exc)

    def store(database: str, name: str) -> CollectionStore:
        return CollectionStore(
            connection.collection(database, name), timeout=mongo.request_timeout
        )

    return EntityStore(
        connection,
        patients=store(mongo.hospital_database, "patients"),
        doctors=store(mongo.hospital_database, "doctors"),
        appointments=store(mongo.hospital_database, "appointments"),
        departments=store(mongo.hospital_database, "departments"),
        users=store(mongo.users_database, "users"),
    )


def build_memory_store(timeout: float = DEFAULT_TIMEOUT) -> EntityStore:
    """Build an entity store held entirely in process memory."""

    def store(name: str, *unique_fields: str) -> CollectionStore:
        return CollectionStore(
            InMemoryCollection(name, unique_fields=unique_fields), timeout=timeout
        )

    return EntityStore(
        InMemoryConnection(),
        patients=store("patients", "email"),
        doctors=store("doctors", "email"),
        appointments=store("appointments"),
        departments=store("departments"),
        users=store("users", "email"),
    )


async def _build_memory(config: AppConfig) -> EntityStore:
    return build_memory_store(config.mongo.request_timeout)


_BUILDERS: dict[StoreAdapter, Callable[[AppConfig], Awaitable[EntityStore]]] = {
    StoreAdapter.MONGO: _build_mongo,
    StoreAdapter.MEMORY: _build_memory,
}


async def build_entity_store(config: AppConfig) -> EntityStore:
    """Build the entity store selected by config."""
    adapter = config.store_adapter
    logger.info("Building entity store with adapter: {}", adapter.value)
    return await _BUILDERS[adapter](config)
