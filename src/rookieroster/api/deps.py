"""FastAPI dependency injection for database sessions, settings and services."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from rookieroster.config import Settings
from rookieroster.db.engine import get_session as session_scope
from rookieroster.db.models import TeamRow
from rookieroster.db.repository import Repository


async def get_engine(request: Request) -> AsyncEngine:
    """Get the database engine from app state."""
    return request.app.state.engine


async def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_session(
    engine: Annotated[AsyncEngine, Depends(get_engine)],
) -> AsyncGenerator[AsyncSession, None]:
    """One session per request, committed when the handler returns."""
    async with session_scope(engine) as session:
        yield session


async def get_repo(session: Annotated[AsyncSession, Depends(get_session)]) -> Repository:
    """Get a repository instance bound to the current session."""
    return Repository(session)


RepoDep = Annotated[Repository, Depends(get_repo)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


async def get_team(team_id: str, repo: RepoDep) -> TeamRow:
    """Resolve the ``team_id`` path parameter or 404."""
    team = await repo.get_team(team_id)
    if team is None:
        raise HTTPException(404, "Team not found")
    return team


TeamDep = Annotated[TeamRow, Depends(get_team)]
