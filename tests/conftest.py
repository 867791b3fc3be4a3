from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from hospital.api.app import create_app
from hospital.config import AppConfig, StoreAdapter
from hospital.store.adapters.memory import InMemoryCollection, InMemoryConnection
from hospital.store.collection import CollectionStore
from hospital.store.entity_store import EntityStore


@pytest.fixture
def connection() -> InMemoryConnection:
    return InMemoryConnection()


@pytest.fixture
def collections() -> dict[str, InMemoryCollection]:
    return {
        "patients": InMemoryCollection("patients", unique_fields=("email",)),
        "doctors": InMemoryCollection("doctors", unique_fields=("email",)),
        "appointments": InMemoryCollection("appointments"),
        "departments": InMemoryCollection("departments"),
        "users": InMemoryCollection("users", unique_fields=("email",)),
    }


@pytest.fixture
def store(
    connection: InMemoryConnection, collections: dict[str, InMemoryCollection]
) -> EntityStore:
    return EntityStore(
        connection,
        **{name: CollectionStore(c, timeout=0.5) for name, c in collections.items()},
    )


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(store_adapter=StoreAdapter.MEMORY)


@pytest.fixture
def app(config: AppConfig, store: EntityStore) -> FastAPI:
    return create_app(config, store=store)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
