from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from core.config import settings
from core.db import engine, init_models
from core.logging import logger

from . import allocation, audit, labs, participants
from .errors import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_models()
    logger.info("{} started ({})", settings.app_name, settings.environment)
    try:
        yield
    finally:
        await engine.dispose()


app = FastAPI(title=settings.app_name, lifespan=lifespan)
register_exception_handlers(app)

app.include_router(labs.router, prefix="/api")
app.include_router(participants.router, prefix="/api")
app.include_router(allocation.router, prefix="/api")
app.include_router(audit.router, prefix="/api")


@app.get("/")
async def root() -> dict[str, str]:
    return {"status": "ok", "environment": settings.environment}
