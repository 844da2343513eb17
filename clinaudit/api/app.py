"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clinaudit.__version__ import __version__
from clinaudit.db.base import init_db

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    logger.info("clinaudit_api_starting", version=__version__)
    init_db()

    yield

    logger.info("clinaudit_api_stopped")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title="ClinAudit",
        description="List/replace_all endpoint for clinical audit records",
        version=__version__,
        lifespan=lifespan,
    )

    # Browser clients post plain-text bodies from any origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    from clinaudit.api.routes import audits
    from clinaudit.api.routes import health

    app.include_router(health.router, tags=["Health"])
    app.include_router(audits.router, tags=["Audits"])

    return app
