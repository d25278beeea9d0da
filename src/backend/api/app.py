"""FastAPI application creation and configuration."""

import logging
import sqlite3
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.core.config import CORS_ORIGINS, DATABASE_PATH
from backend.legislation.router import router as legislation_router
from backend.requirements.router import router as requirements_router
from uslex.core.exceptions import StoreUnavailableError
from uslex.core.store import ProvisionStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Refuse to start without a readable provision database."""
    with ProvisionStore(app.state.db_path, read_only=True) as store:
        metadata = store.get_metadata()
    logger.info(
        f"Serving {app.state.db_path} built at {metadata.get('built_at', 'unknown')}",
        extra={"db_path": app.state.db_path, **metadata},
    )
    yield


def create_app(db_path: Optional[str] = None) -> FastAPI:
    """Create the API app over the provision database at ``db_path``."""
    app = FastAPI(
        title="USLex API",
        description="Search, citation lookup and cross-state comparison of US cybersecurity and privacy statutes",
        version="0.1.0",
        redirect_slashes=False,
        lifespan=lifespan,
    )
    app.state.db_path = db_path or DATABASE_PATH

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(legislation_router)
    app.include_router(requirements_router)

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable(request: Request, exc: StoreUnavailableError):
        logger.error(f"Provision store unavailable: {exc}")
        return JSONResponse(status_code=503, content={"status": "unavailable", "error": str(exc)})

    @app.get("/healthcheck")
    async def health_check():
        """Health check with provision database verification."""
        try:
            with ProvisionStore(app.state.db_path, read_only=True) as store:
                counts = store.counts()
                metadata = store.get_metadata()
        except (StoreUnavailableError, sqlite3.Error) as e:
            return JSONResponse(status_code=503, content={"status": "unhealthy", "error": str(e)})

        return JSONResponse(
            status_code=200,
            content={
                "status": "healthy",
                "database": "sqlite",
                "built_at": metadata.get("built_at"),
                "schema_version": metadata.get("schema_version"),
                **counts,
            },
        )

    return app
