"""Teams router – teams formed around the top ideas."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Form
from sqlalchemy.ext.asyncio import AsyncSession

from hacksite.database import get_db
from hacksite.models.admin_phase import PhaseName
from hacksite.models.user import User
from hacksite.routers.auth import require_user
from hacksite.routers.changes import get_change_feed
from hacksite.routers.phases import require_phase
from hacksite.schemas.team import TeamIdeaOut, TeamMemberOut, TeamOut
from hacksite.services import teams as team_service
from hacksite.services.change_feed import ChangeFeed

router = APIRouter(prefix="/teams", tags=["teams"])


def _team_out(team, members, idea) -> TeamOut:
    out = TeamOut.model_validate(team)
    out.members = [TeamMemberOut.model_validate(m) for m in members]
    out.idea = TeamIdeaOut.model_validate(idea) if idea else None
    return out


@router.get("", response_model=List[TeamOut])
async def list_teams(db: AsyncSession = Depends(get_db)):
    """List all teams with their members and idea."""
    return [_team_out(*row) for row in await team_service.list_teams(db)]


@router.get("/mine")
async def my_teams(
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    return {"team_ids": await team_service.user_team_ids(db, current_user.id)}


@router.post(
    "",
    response_model=TeamOut,
    status_code=201,
    dependencies=[Depends(require_phase(PhaseName.TEAMS_OPEN))],
)
async def create_team(
    name: str = Form(...),
    idea_id: int = Form(...),
    description: Optional[str] = Form(None),
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    """Create a new team for an idea, with the creator as leader."""
    team = await team_service.create_team(db, name, description, current_user.id, idea_id)
    await feed.publish("teams", team.id, "INSERT")
    rows = [row for row in await team_service.list_teams(db) if row[0].id == team.id]
    return _team_out(*rows[0])


@router.post("/{team_id}/join")
async def join_team(
    team_id: int,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    """Join a team; joining twice is a no-op."""
    added = await team_service.join_team(db, team_id, current_user.id)
    if added:
        await feed.publish("team_members", team_id, "INSERT", user_id=current_user.id)
    return {"ok": True, "joined": added}


@router.post("/{team_id}/leave")
async def leave_team(
    team_id: int,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    """Member leaves the team."""
    await team_service.leave_team(db, team_id, current_user.id)
    await feed.publish("team_members", team_id, "DELETE", user_id=current_user.id)
    return {"ok": True}
