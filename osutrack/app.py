"""FastAPI application factory and configuration."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

from . import models  # noqa: F401 - ensure models are registered with SQLModel
from .api import register_routes
from .core import (
    ALLOWED_CORS_ORIGINS,
    DATABASE_URL,
    DB_RESET,
    OSU_API_KEY,
    OSU_API_TIMEOUT,
    OSU_API_URL,
    TOP_PLAYS_LIMIT,
    OsuTrackError,
    configure_logging,
    make_engine,
)
from .services import KeyedLocks, OsuApiClient

logger = logging.getLogger(__name__)


async def _handle_error(request: Request, exc: OsuTrackError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


def create_app(
    engine: Optional[Engine] = None,
    upstream: Optional[OsuApiClient] = None,
    *,
    top_plays_limit: int = TOP_PLAYS_LIMIT,
    reset_db: bool = DB_RESET,
) -> FastAPI:
    """Build the app around an explicitly constructed engine and API client."""

    engine = engine if engine is not None else make_engine(DATABASE_URL)
    upstream = upstream if upstream is not None else OsuApiClient(
        OSU_API_KEY, OSU_API_URL, timeout=OSU_API_TIMEOUT
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if reset_db:
            SQLModel.metadata.drop_all(engine)
        SQLModel.metadata.create_all(engine)
        yield
        engine.dispose()

    app = FastAPI(title="osu!track API", version="2.0.0", lifespan=lifespan)
    app.state.engine = engine
    app.state.upstream = upstream
    app.state.locks = KeyedLocks()
    app.state.top_plays_limit = top_plays_limit

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_exception_handler(OsuTrackError, _handle_error)

    register_routes(app)
    return app


def main() -> None:
    import uvicorn

    configure_logging()
    uvicorn.run("osutrack.app:create_app", factory=True, host="127.0.0.1", port=3000)


if __name__ == "__main__":
    main()
