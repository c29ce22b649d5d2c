"""
Hacksite: FastAPI application entry-point.

Run with:
    uvicorn hacksite.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from hacksite import models  # noqa: F401  (registers tables on Base.metadata)
from hacksite.config import settings
from hacksite.database import Base, async_session, engine, get_db
from hacksite.models.idea import Idea
from hacksite.models.project import Project
from hacksite.models.team import Team
from hacksite.models.user import User

# ── Import routers ──
from hacksite.routers import (
    admin,
    auth,
    changes,
    event,
    feedback,
    ideas,
    judges,
    phases,
    projects,
    teams,
    users,
)
from hacksite.services.change_feed import ChangeFeed
from hacksite.services.event_content import EventContent
from hacksite.services.phases import PhaseCache, session_loader

logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)


# ── Lifespan: create tables on startup ──
@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="Hackathon event site: ideas, teams, submissions, judging and winners.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=("*",))

# ── Shared per-process state ──
app.state.phase_cache = PhaseCache(session_loader(async_session))
app.state.change_feed = ChangeFeed()
app.state.event_content = EventContent()

# ── Register API routers ──
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(phases.router)
app.include_router(ideas.router)
app.include_router(teams.router)
app.include_router(projects.router)
app.include_router(judges.router)
app.include_router(feedback.router)
app.include_router(admin.router)
app.include_router(event.router)
app.include_router(changes.router)


# ── Landing summary ──
@app.get("/")
async def homepage(db: AsyncSession = Depends(get_db)):
    users_count = (await db.execute(select(func.count(User.id)))).scalar() or 0
    ideas_count = (await db.execute(select(func.count(Idea.id)))).scalar() or 0
    teams_count = (await db.execute(select(func.count(Team.id)))).scalar() or 0
    proj_count = (await db.execute(select(func.count(Project.id)))).scalar() or 0

    return {
        "name": settings.APP_NAME,
        "stats": {
            "users": users_count,
            "ideas": ideas_count,
            "teams": teams_count,
            "projects": proj_count,
        },
    }
