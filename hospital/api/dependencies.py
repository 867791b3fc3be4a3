import asyncio
from typing import Annotated

from fastapi import Depends, Request

from hospital.config import AppConfig
from hospital.store.entity_store import EntityStore


async def get_store(request: Request) -> EntityStore:
    return request.app.state.store


async def request_deadline(request: Request) -> float:
    """Event-loop time by which every store call of this request must finish."""
    config: AppConfig = request.app.state.config
    return asyncio.get_running_loop().time() + config.mongo.request_timeout


StoreDep = Annotated[EntityStore, Depends(get_store)]
DeadlineDep = Annotated[float, Depends(request_deadline)]
