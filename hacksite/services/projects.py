"""Project registry and the one-vote-per-attendee showcase ledger."""

from typing import Dict, List, Optional, Set

from fastapi import HTTPException
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hacksite.models.idea import Idea
from hacksite.models.project import Project
from hacksite.models.showcase_vote import ShowcaseVote
from hacksite.models.team import Team
from hacksite.services.teams import get_team, is_member

UNTITLED = "Untitled Project"
NO_DESCRIPTION = "No description provided."


def _clean(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


async def get_project(db: AsyncSession, project_id: int) -> Project:
    result = await db.execute(select(Project).where(Project.id == project_id))
    project = result.scalar_one_or_none()
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


async def submit_project(
    db: AsyncSession,
    team_id: int,
    title: str,
    description: str,
    repo_url: Optional[str] = None,
    demo_url: Optional[str] = None,
    video_url: Optional[str] = None,
    track: Optional[str] = None,
    presentation_url: Optional[str] = None,
    submitter_id: Optional[int] = None,
) -> Project:
    if not _clean(title) or not _clean(description):
        raise HTTPException(status_code=400, detail="Title and description are required")

    await get_team(db, team_id)
    if submitter_id is not None and not await is_member(db, team_id, submitter_id):
        raise HTTPException(status_code=403, detail="You must be on the team to submit its project")

    project = Project(
        team_id=team_id,
        title=_clean(title),
        description=_clean(description),
        repo_url=_clean(repo_url),
        demo_url=_clean(demo_url),
        video_url=_clean(video_url),
        presentation_url=_clean(presentation_url),
        track=_clean(track),
    )
    db.add(project)
    await db.commit()
    await db.refresh(project)
    return project


async def list_projects(db: AsyncSession, sort: str = "votes") -> List[dict]:
    """Showcase listing with the team name and idea-based display fallbacks."""
    if sort == "recent":
        order = (Project.submitted_at.desc(), Project.id.desc())
    else:
        order = (Project.showcase_vote_count.desc(), Project.submitted_at.desc(), Project.id.desc())

    result = await db.execute(
        select(Project, Team, Idea)
        .outerjoin(Team, Project.team_id == Team.id)
        .outerjoin(Idea, Team.idea_id == Idea.id)
        .order_by(*order)
    )

    rows = []
    for project, team, idea in result.all():
        rows.append({
            "id": project.id,
            "team_id": project.team_id,
            "team_name": team.name if team else None,
            "idea_id": idea.id if idea else None,
            "title": project.title or (idea.title if idea else None) or UNTITLED,
            "description": project.description or (idea.description if idea else None) or NO_DESCRIPTION,
            "track": project.track,
            "repo_url": project.repo_url,
            "demo_url": project.demo_url,
            "video_url": project.video_url,
            "presentation_url": project.presentation_url,
            "showcase_vote_count": project.showcase_vote_count,
            "judge_vote_count": project.judge_vote_count,
            "judges_score": project.judges_score,
            "is_winner": project.is_winner,
            "winner_category": project.winner_category,
            "submitted_at": project.submitted_at.isoformat() if project.submitted_at else None,
        })
    return rows


async def set_judges_score(db: AsyncSession, project_id: int, score: float) -> Project:
    project = await get_project(db, project_id)
    project.judges_score = float(score)
    await db.commit()
    return project


# ═══════════════════════════════════════════════════════════════
#  Showcase voting
# ═══════════════════════════════════════════════════════════════

async def _recount(db: AsyncSession, project: Project) -> None:
    result = await db.execute(
        select(func.count(ShowcaseVote.id)).where(ShowcaseVote.project_id == project.id)
    )
    project.showcase_vote_count = result.scalar() or 0


async def has_voted(db: AsyncSession, project_id: int, user_id: int) -> bool:
    result = await db.execute(
        select(ShowcaseVote.id).where(
            ShowcaseVote.project_id == project_id,
            ShowcaseVote.voter_id == user_id,
        )
    )
    return result.first() is not None


async def vote_showcase(db: AsyncSession, project_id: int, user_id: int) -> None:
    project = await get_project(db, project_id)
    if await has_voted(db, project_id, user_id):
        return

    db.add(ShowcaseVote(project_id=project_id, voter_id=user_id))
    try:
        await db.flush()
    except IntegrityError:
        # Already voted from another tab
        await db.rollback()
        return
    await _recount(db, project)
    await db.commit()


async def unvote_showcase(db: AsyncSession, project_id: int, user_id: int) -> None:
    project = await get_project(db, project_id)
    await db.execute(
        delete(ShowcaseVote).where(
            ShowcaseVote.project_id == project_id,
            ShowcaseVote.voter_id == user_id,
        )
    )
    await _recount(db, project)
    await db.commit()


async def toggle_showcase_vote(db: AsyncSession, project_id: int, user_id: int) -> bool:
    """Flip the user's vote. Returns True when a vote is now present."""
    if await has_voted(db, project_id, user_id):
        await unvote_showcase(db, project_id, user_id)
        return False
    await vote_showcase(db, project_id, user_id)
    return True


async def user_showcase_votes(db: AsyncSession, user_id: int) -> Set[int]:
    result = await db.execute(select(ShowcaseVote.project_id).where(ShowcaseVote.voter_id == user_id))
    return set(result.scalars().all())
