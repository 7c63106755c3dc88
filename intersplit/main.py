from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from intersplit.api.commands import router as commands_router
from intersplit.api.rooms import router as rooms_router
from intersplit.config import get_settings
from intersplit.storage.database import Base, engine


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging("DEBUG" if settings.debug else settings.log_level)
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title="InterSplit Ledger API", lifespan=lifespan)
app.include_router(rooms_router)
app.include_router(commands_router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
