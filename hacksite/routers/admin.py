"""
Admin router: control panel for phases, ideas, scores and winners.

Endpoints:
    POST /admin/login                    → password check, set admin cookie
    GET  /admin/phases                   → stored flags
    POST /admin/phases/{phase}           → open/close a phase
    GET  /admin/ideas                    → ideas by votes
    POST /admin/ideas/{id}/lock          → lock an idea
    POST /admin/ideas/{id}/delete        → delete an idea
    GET  /admin/projects                 → projects, newest first
    POST /admin/projects/{id}/score      → set judges' score
    POST /admin/reveal-winners           → run winner resolution
    GET  /admin/feedback                 → all feedback
    POST /admin/feedback/{id}/delete     → delete feedback
"""

import hmac
import logging
from typing import List

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hacksite.config import settings
from hacksite.database import get_db
from hacksite.models.admin_phase import AdminPhase, PhaseName
from hacksite.models.project import Project
from hacksite.routers.auth import ADMIN_COOKIE_KEY, read_token, set_token_cookie
from hacksite.routers.changes import get_change_feed
from hacksite.routers.phases import get_phase_cache
from hacksite.schemas.feedback import FeedbackOut
from hacksite.schemas.idea import IdeaOut
from hacksite.schemas.project import ProjectOut
from hacksite.services import feedback as feedback_service
from hacksite.services import ideas as idea_service
from hacksite.services import projects as project_service
from hacksite.services.change_feed import ChangeFeed
from hacksite.services.phases import PhaseCache, toggle_phase
from hacksite.services.winners import reveal_winners

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


def require_admin(request: Request) -> None:
    payload = read_token(request, ADMIN_COOKIE_KEY)
    if not payload or payload.get("role") != "admin":
        raise HTTPException(status_code=401, detail="Admin login required")


# ═══════════════════════════════════════════════════════════════
#  Login
# ═══════════════════════════════════════════════════════════════

@router.post("/login")
async def admin_login(password: str = Form(...)):
    if not settings.ADMIN_PASSWORD:
        raise HTTPException(
            status_code=503,
            detail="Admin password not configured. Please set ADMIN_PASSWORD in your environment variables.",
        )
    if not hmac.compare_digest(password.encode(), settings.ADMIN_PASSWORD.encode()):
        logger.warning("Rejected admin login attempt")
        raise HTTPException(status_code=401, detail="Incorrect password")

    response = JSONResponse({"ok": True})
    return set_token_cookie(response, ADMIN_COOKIE_KEY, {"sub": "admin", "role": "admin"})


# ═══════════════════════════════════════════════════════════════
#  Phases
# ═══════════════════════════════════════════════════════════════

@router.get("/phases", dependencies=[Depends(require_admin)])
async def list_phases(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(AdminPhase).order_by(AdminPhase.phase_name))
    stored = {p.phase_name: p for p in result.scalars().all()}
    return [
        {
            "phase_name": phase.value,
            "is_open": stored[phase].is_open if phase in stored else False,
            "updated_at": stored[phase].updated_at.isoformat()
            if phase in stored and stored[phase].updated_at else None,
        }
        for phase in PhaseName
    ]


@router.post("/phases/{phase}", dependencies=[Depends(require_admin)])
async def set_phase(
    phase: PhaseName,
    is_open: bool = Form(...),
    db: AsyncSession = Depends(get_db),
    cache: PhaseCache = Depends(get_phase_cache),
    feed: ChangeFeed = Depends(get_change_feed),
):
    await toggle_phase(db, phase, is_open)
    cache.invalidate()
    await feed.publish("admin_phases", None, phase_name=phase.value, is_open=is_open)
    return {"phase_name": phase.value, "is_open": is_open}


# ═══════════════════════════════════════════════════════════════
#  Ideas
# ═══════════════════════════════════════════════════════════════

@router.get("/ideas", response_model=List[IdeaOut], dependencies=[Depends(require_admin)])
async def list_ideas(db: AsyncSession = Depends(get_db)):
    return await idea_service.list_ideas(db)


@router.post("/ideas/{idea_id}/lock", response_model=IdeaOut, dependencies=[Depends(require_admin)])
async def lock_idea(
    idea_id: int,
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    idea = await idea_service.lock_idea(db, idea_id)
    await feed.publish("ideas", idea_id)
    return idea


@router.post("/ideas/{idea_id}/delete", dependencies=[Depends(require_admin)])
async def delete_idea(
    idea_id: int,
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    await idea_service.delete_idea(db, idea_id)
    await feed.publish("ideas", idea_id, "DELETE")
    return {"ok": True}


# ═══════════════════════════════════════════════════════════════
#  Projects & winners
# ═══════════════════════════════════════════════════════════════

@router.get("/projects", response_model=List[ProjectOut], dependencies=[Depends(require_admin)])
async def list_projects(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Project).order_by(Project.submitted_at.desc(), Project.id.desc()))
    return result.scalars().all()


@router.post("/projects/{project_id}/score", response_model=ProjectOut, dependencies=[Depends(require_admin)])
async def set_score(
    project_id: int,
    score: float = Form(...),
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    project = await project_service.set_judges_score(db, project_id, score)
    await feed.publish("projects", project_id)
    return project


@router.post("/reveal-winners", dependencies=[Depends(require_admin)])
async def reveal(
    db: AsyncSession = Depends(get_db),
    cache: PhaseCache = Depends(get_phase_cache),
    feed: ChangeFeed = Depends(get_change_feed),
):
    awards = await reveal_winners(db)
    cache.invalidate()
    for award in awards:
        await feed.publish("projects", award["project_id"], category=award["category"])
    await feed.publish("admin_phases", None, phase_name=PhaseName.WINNERS_REVEALED.value, is_open=True)
    return {"awards": awards}


# ═══════════════════════════════════════════════════════════════
#  Feedback
# ═══════════════════════════════════════════════════════════════

@router.get("/feedback", response_model=List[FeedbackOut], dependencies=[Depends(require_admin)])
async def list_feedback(db: AsyncSession = Depends(get_db)):
    return await feedback_service.list_feedback(db)


@router.post("/feedback/{feedback_id}/delete", dependencies=[Depends(require_admin)])
async def delete_feedback(feedback_id: int, db: AsyncSession = Depends(get_db)):
    await feedback_service.delete_feedback(db, feedback_id)
    return {"ok": True}
