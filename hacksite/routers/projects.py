"""
Projects router: submissions and the public showcase.

Endpoints:
    GET  /projects                    → showcase listing (sort=votes|recent)
    GET  /projects/votes/mine         → project ids the user voted for
    POST /projects                    → submit a team's project
    POST /projects/{id}/vote          → cast showcase vote
    POST /projects/{id}/unvote        → withdraw showcase vote
    POST /projects/{id}/toggle-vote   → flip showcase vote
"""

from typing import Optional

from fastapi import APIRouter, Depends, Form
from sqlalchemy.ext.asyncio import AsyncSession

from hacksite.database import get_db
from hacksite.models.admin_phase import PhaseName
from hacksite.models.user import User
from hacksite.routers.auth import require_user
from hacksite.routers.changes import get_change_feed
from hacksite.routers.phases import require_phase
from hacksite.schemas.project import ProjectOut
from hacksite.services import projects as project_service
from hacksite.services.change_feed import ChangeFeed

router = APIRouter(prefix="/projects", tags=["projects"])

showcase_open = Depends(require_phase(PhaseName.SHOWCASE_VOTING))


async def _vote_state(db: AsyncSession, feed: ChangeFeed, project_id: int, user_id: int) -> dict:
    project = await project_service.get_project(db, project_id)
    await feed.publish("showcase_votes", project_id, showcase_vote_count=project.showcase_vote_count)
    return {
        "project_id": project_id,
        "voted": await project_service.has_voted(db, project_id, user_id),
        "showcase_vote_count": project.showcase_vote_count,
    }


@router.get("")
async def list_projects(sort: str = "votes", db: AsyncSession = Depends(get_db)):
    return await project_service.list_projects(db, sort=sort)


@router.get("/votes/mine")
async def my_votes(
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    return {"project_ids": sorted(await project_service.user_showcase_votes(db, current_user.id))}


@router.post(
    "",
    response_model=ProjectOut,
    status_code=201,
    dependencies=[Depends(require_phase(PhaseName.SUBMISSIONS_OPEN))],
)
async def submit_project(
    team_id: int = Form(...),
    title: str = Form(...),
    description: str = Form(...),
    repo_url: Optional[str] = Form(None),
    demo_url: Optional[str] = Form(None),
    video_url: Optional[str] = Form(None),
    track: Optional[str] = Form(None),
    presentation_url: Optional[str] = Form(None),
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    project = await project_service.submit_project(
        db,
        team_id=team_id,
        title=title,
        description=description,
        repo_url=repo_url,
        demo_url=demo_url,
        video_url=video_url,
        track=track,
        presentation_url=presentation_url,
        submitter_id=current_user.id,
    )
    await feed.publish("projects", project.id, "INSERT")
    return project


@router.post("/{project_id}/vote", dependencies=[showcase_open])
async def vote(
    project_id: int,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    await project_service.vote_showcase(db, project_id, current_user.id)
    return await _vote_state(db, feed, project_id, current_user.id)


@router.post("/{project_id}/unvote", dependencies=[showcase_open])
async def unvote(
    project_id: int,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    await project_service.unvote_showcase(db, project_id, current_user.id)
    return await _vote_state(db, feed, project_id, current_user.id)


@router.post("/{project_id}/toggle-vote", dependencies=[showcase_open])
async def toggle_vote(
    project_id: int,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    await project_service.toggle_showcase_vote(db, project_id, current_user.id)
    return await _vote_state(db, feed, project_id, current_user.id)
