"""FastAPI entry point exposing the SFX tools.

Run with:
    uvicorn --factory sfx_worker.app.main:create_app
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI
from loguru import logger

from ..services.orchestrator import SfxOrchestrator, build_orchestrator
from .logging_setup import configure_logging
from .routes import router
from .settings import Settings, get_settings
from .tools import ToolDispatcher


def create_app(
    settings: Optional[Settings] = None,
    orchestrator: Optional[SfxOrchestrator] = None,
) -> FastAPI:
    """Create and configure FastAPI instance."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    composer = orchestrator or build_orchestrator(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info("SFX worker started", model=composer.inference_model)
        yield
        await composer.aclose()
        logger.info("SFX worker stopped")

    app = FastAPI(title="SFX Worker", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.composer = composer
    app.state.dispatcher = ToolDispatcher(composer)
    app.include_router(router)
    return app


def run() -> None:
    settings = get_settings()
    uvicorn.run(create_app, factory=True, host=settings.host, port=settings.port)
