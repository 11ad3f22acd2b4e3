"""FastAPI application for the round-tracking API."""

import logging
import os
from contextlib import asynccontextmanager

import asyncpg
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from database.connection import db
from database.db_manager import DatabaseManager
from database.exceptions import DatabaseError

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:5173"


def _configure_logging() -> None:
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize DB pool on startup, close on shutdown."""
    dsn = os.environ.get("DATABASE_URL")
    if dsn:
        await db.initialize(dsn)
        await db.apply_schema()
        app.state.db_manager = DatabaseManager(db.pool)
    else:
        logger.warning("DATABASE_URL not set; persistence endpoints will return 503")
    logger.info("API started")
    yield
    await db.close()


def create_app() -> FastAPI:
    _configure_logging()
    app = FastAPI(
        title="Scoring Method API",
        version="1.0.0",
        lifespan=lifespan,
    )

    origins = os.environ.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from api.routers import insights, rounds, scoring, templates
    app.include_router(scoring.router, prefix="/api/scoring", tags=["scoring"])
    app.include_router(rounds.router, prefix="/api/rounds", tags=["rounds"])
    app.include_router(templates.router, prefix="/api/templates", tags=["templates"])
    app.include_router(insights.router, prefix="/api/insights", tags=["insights"])

    @app.exception_handler(DatabaseError)
    @app.exception_handler(asyncpg.PostgresError)
    async def database_error(request: Request, exc: Exception):
        logger.error(
            "Unhandled database error on %s %s", request.method, request.url.path,
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"detail": "Database error"})

    @app.get("/api/health")
    async def health():
        healthy = db.is_initialized and await db.health_check()
        return {"status": "ok" if healthy else "degraded", "database": healthy}

    return app


app = create_app()
