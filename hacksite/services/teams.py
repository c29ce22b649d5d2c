"""Team registry: teams bound 1:1 to an idea, with capped membership."""

from typing import List, Tuple

from fastapi import HTTPException
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hacksite.config import settings
from hacksite.models.idea import Idea
from hacksite.models.team import Team
from hacksite.models.team_member import TeamMember
from hacksite.services.ideas import get_idea, top_ideas

TEAM_EXISTS = "A team already exists for this idea. Please select a different idea."


async def get_team(db: AsyncSession, team_id: int) -> Team:
    result = await db.execute(select(Team).where(Team.id == team_id))
    team = result.scalar_one_or_none()
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")
    return team


async def is_member(db: AsyncSession, team_id: int, user_id: int) -> bool:
    result = await db.execute(
        select(TeamMember.id).where(
            TeamMember.team_id == team_id,
            TeamMember.user_id == user_id,
        )
    )
    return result.first() is not None


async def member_count(db: AsyncSession, team_id: int) -> int:
    result = await db.execute(
        select(func.count(TeamMember.id)).where(TeamMember.team_id == team_id)
    )
    return result.scalar() or 0


async def create_team(
    db: AsyncSession,
    name: str,
    description: str,
    leader_id: int,
    idea_id: int,
) -> Team:
    """
    Create a team for an idea and enrol its leader.

    Both rows go out in a single transaction: if the leader's membership
    cannot be written, the team row is rolled back with it.
    """
    name = (name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Please select an idea and provide a team name")

    idea = await get_idea(db, idea_id)
    eligible = {i.id for i in await top_ideas(db)}
    if idea.id not in eligible:
        raise HTTPException(
            status_code=400,
            detail=f"Only the top {settings.TEAM_ELIGIBLE_IDEAS} ideas by vote count can form teams",
        )

    existing = await db.execute(select(Team.id).where(Team.idea_id == idea_id))
    if existing.first() is not None:
        raise HTTPException(status_code=409, detail=TEAM_EXISTS)

    # 1. Create Team
    team = Team(
        name=name,
        description=(description or "").strip() or None,
        leader_id=leader_id,
        idea_id=idea_id,
        max_members=settings.TEAM_MAX_MEMBERS,
    )
    db.add(team)
    await db.flush()  # to get team.id

    # 2. Add creator as member
    db.add(TeamMember(team_id=team.id, user_id=leader_id))

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail=TEAM_EXISTS)
    await db.refresh(team)
    return team


async def join_team(db: AsyncSession, team_id: int, user_id: int) -> bool:
    """Join a team. Returns True when a membership row was added."""
    team = await get_team(db, team_id)

    if await is_member(db, team_id, user_id):
        return False

    if await member_count(db, team_id) >= team.max_members:
        raise HTTPException(status_code=400, detail="Team is full")

    db.add(TeamMember(team_id=team_id, user_id=user_id))
    try:
        await db.commit()
    except IntegrityError:
        # Duplicate join from a second tab; the user is a member either way
        await db.rollback()
        return False
    return True


async def leave_team(db: AsyncSession, team_id: int, user_id: int) -> None:
    team = await get_team(db, team_id)
    if team.leader_id == user_id:
        raise HTTPException(status_code=400, detail="Team leader cannot leave the team")

    await db.execute(
        delete(TeamMember).where(
            TeamMember.team_id == team_id,
            TeamMember.user_id == user_id,
        )
    )
    await db.commit()


async def list_teams(db: AsyncSession) -> List[Tuple[Team, List[TeamMember], Idea]]:
    """All teams, newest first, with their members and bound idea."""
    teams_result = await db.execute(select(Team).order_by(Team.created_at.desc(), Team.id.desc()))
    teams = teams_result.scalars().all()
    if not teams:
        return []

    team_ids = [t.id for t in teams]
    members_result = await db.execute(
        select(TeamMember).where(TeamMember.team_id.in_(team_ids)).order_by(TeamMember.joined_at)
    )
    members: dict = {tid: [] for tid in team_ids}
    for m in members_result.scalars().all():
        members[m.team_id].append(m)

    ideas_result = await db.execute(select(Idea).where(Idea.id.in_([t.idea_id for t in teams])))
    ideas = {i.id: i for i in ideas_result.scalars().all()}

    return [(t, members[t.id], ideas.get(t.idea_id)) for t in teams]


async def user_team_ids(db: AsyncSession, user_id: int) -> List[int]:
    result = await db.execute(select(TeamMember.team_id).where(TeamMember.user_id == user_id))
    return list(result.scalars().all())
