"""FastAPI app entrypoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.api.routes import public_router, router
from src.api.schemas import PLUGIN_INFO
from src.config import get_settings
from src.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # Initialize logging FIRST so all subsequent operations produce JSON logs
    setup_logging(settings.log_level)

    logger.info(
        "plugin loaded",
        extra={
            "plugin_id": PLUGIN_INFO.id,
            "auth_enabled": bool(settings.api_key),
            "max_attempts": settings.max_attempts,
            "page_timeout": settings.page_timeout_seconds,
        },
    )

    yield

    logger.info("plugin exited", extra={"plugin_id": PLUGIN_INFO.id})


app = FastAPI(title=PLUGIN_INFO.name, description=PLUGIN_INFO.description, lifespan=lifespan)
app.include_router(public_router)
app.include_router(router)


@app.get("/health")
async def health():
    return {"status": "ok"}
