"""Judges router: sign-in for listed judges and top-3 rank assignment."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from hacksite.config import settings
from hacksite.database import get_db
from hacksite.routers.auth import JUDGE_COOKIE_KEY, read_token, set_token_cookie
from hacksite.routers.changes import get_change_feed
from hacksite.schemas.project import ProjectOut
from hacksite.services import judging
from hacksite.services.change_feed import ChangeFeed

router = APIRouter(prefix="/judges", tags=["judges"])


def get_current_judge(request: Request) -> str:
    payload = read_token(request, JUDGE_COOKIE_KEY)
    judge = (payload or {}).get("sub")
    if payload is None or payload.get("role") != "judge" or judge not in settings.judges:
        raise HTTPException(status_code=401, detail="Judge login required")
    return judge


@router.post("/login")
async def judge_login(judge_name: str = Form(...)):
    name = judge_name.strip().lower()
    if name not in settings.judges:
        raise HTTPException(
            status_code=403,
            detail="Access denied. Only authorized judges can access this page.",
        )
    response = JSONResponse({"ok": True, "judge_name": name})
    return set_token_cookie(response, JUDGE_COOKIE_KEY, {"sub": name, "role": "judge"})


@router.get("/logout")
async def judge_logout():
    response = JSONResponse({"ok": True})
    response.delete_cookie(JUDGE_COOKIE_KEY)
    return response


@router.get("/projects", response_model=List[ProjectOut])
async def projects(
    judge: str = Depends(get_current_judge),
    db: AsyncSession = Depends(get_db),
):
    """All projects, highest weighted judge vote first."""
    return await judging.projects_for_judging(db)


@router.get("/votes")
async def my_ranks(
    judge: str = Depends(get_current_judge),
    db: AsyncSession = Depends(get_db),
):
    """The judge's picks keyed by project id."""
    votes = await judging.judge_votes(db, judge)
    return {str(project_id): rank for project_id, rank in votes.items()}


@router.post("/rank")
async def change_rank(
    project_id: int = Form(...),
    rank: Optional[int] = Form(None),
    judge: str = Depends(get_current_judge),
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    """Assign ``rank`` to the project (moving it if held elsewhere) or clear it."""
    votes = await judging.handle_rank_change(db, project_id, judge, rank)
    await feed.publish("judge_votes", project_id, judge_name=judge)
    return {str(pid): r for pid, r in votes.items()}
