from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pickleball_club.bootstrap import build_context
from pickleball_club.config import DEFAULT_PROFILE, ENV_PREFIX, configure_logging
from pickleball_club.views import health_router


logger = logging.getLogger(__name__)

_PROFILE_ENV = f"{ENV_PREFIX}PROFILE"


def create_app(
    *,
    profile: str | None = None,
    env_dir: Path | None = None,
    database_url: str | None = None,
) -> FastAPI:
    # Configure logging first
    configure_logging()

    resolved_profile = profile or os.getenv(_PROFILE_ENV, DEFAULT_PROFILE)
    overrides = {"datasource_url": database_url} if database_url else None

    # Build every component up front; a fault here stops the app from starting
    context = build_context(resolved_profile, env_dir=env_dir, overrides=overrides)
    settings = context.get("settings")
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        context.close()

    app = FastAPI(
        title="Pickleball Club Backend",
        version="0.1.0",
        description="Pickleball club backend service.",
        lifespan=lifespan,
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)

    logger.info(f"Application ready with profile '{resolved_profile}'")
    return app
