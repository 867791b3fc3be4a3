from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from hospital.api.errors import register_exception_handlers
from hospital.api.routes import router
from hospital.config import AppConfig
from hospital.store.entity_store import EntityStore
from hospital.store.factory import build_entity_store


def create_app(config: AppConfig, store: EntityStore | None = None) -> FastAPI:
    """Build the HTTP application.

    The entity store is built when the application starts, unless one is
    passed in, and is closed when it shuts down in either case.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if getattr(app.state, "store", None) is None:
            app.state.store = await build_entity_store(config)
        logger.info("Hospital management service started")
        try:
            yield
        finally:
            await app.state.store.close()
            logger.info("Hospital management service stopped")

    app = FastAPI(title="Hospital Management Service", lifespan=lifespan)
    app.state.config = config
    app.state.store = store
    register_exception_handlers(app)
    app.include_router(router)
    return app
