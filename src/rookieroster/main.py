"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from rookieroster.api.events import router as events_router
from rookieroster.api.stats import router as stats_router
from rookieroster.api.teams import router as teams_router
from rookieroster.config import Settings
from rookieroster.db.engine import create_engine, create_tables

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: create engine and tables. Shutdown: dispose the engine."""
    settings: Settings = app.state.settings
    engine = create_engine(settings.database_url)
    await create_tables(engine)
    app.state.engine = engine
    logger.info("startup env=%s tz=%s", settings.rookieroster_env, settings.rookieroster_timezone)

    yield

    await engine.dispose()
    logger.info("shutdown")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the Rookie Roster FastAPI application."""
    settings = settings or Settings()

    logging.basicConfig(
        level=getattr(logging, settings.rookieroster_log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Rookie Roster",
        version="0.1.0",
        description="Team rosters, schedules, game stats and a team news feed",
        docs_url="/docs" if settings.rookieroster_env != "production" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.include_router(teams_router)
    app.include_router(events_router)
    app.include_router(stats_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "env": settings.rookieroster_env}

    return app


app = create_app()
