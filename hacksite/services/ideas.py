"""
Idea registry and idea voting ledger.

Every user holds between 0 and ``MAX_VOTES_PER_IDEA`` vote tokens on each
idea; a token is one ``idea_votes`` row.  ``ideas.vote_count`` is rewritten
from the ledger in the same transaction as every ledger change.
"""

from typing import Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hacksite.config import settings
from hacksite.models.idea import Idea
from hacksite.models.idea_vote import IdeaVote
from hacksite.models.team import Team


def clamp_votes(target: int) -> int:
    return max(0, min(settings.MAX_VOTES_PER_IDEA, int(target)))


async def get_idea(db: AsyncSession, idea_id: int) -> Idea:
    result = await db.execute(select(Idea).where(Idea.id == idea_id))
    idea = result.scalar_one_or_none()
    if not idea:
        raise HTTPException(status_code=404, detail="Idea not found")
    return idea


# ═══════════════════════════════════════════════════════════════
#  Registry
# ═══════════════════════════════════════════════════════════════

async def submit_idea(db: AsyncSession, title: str, description: str, author_id: int) -> Idea:
    title = (title or "").strip()
    description = (description or "").strip()
    if not title or not description:
        raise HTTPException(status_code=400, detail="Title and description are required")

    idea = Idea(title=title, description=description, author_id=author_id)
    db.add(idea)
    await db.commit()
    await db.refresh(idea)
    return idea


async def list_ideas(db: AsyncSession, limit: Optional[int] = None) -> List[Idea]:
    query = select(Idea).order_by(Idea.vote_count.desc(), Idea.created_at.desc(), Idea.id.desc())
    if limit:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def top_ideas(db: AsyncSession, limit: int = settings.TEAM_ELIGIBLE_IDEAS) -> List[Idea]:
    """Ideas eligible for team formation."""
    return await list_ideas(db, limit=limit)


async def lock_idea(db: AsyncSession, idea_id: int) -> Idea:
    idea = await get_idea(db, idea_id)
    idea.is_locked = True
    await db.commit()
    return idea


async def delete_idea(db: AsyncSession, idea_id: int) -> None:
    """Hard-delete an idea and its votes, unless a team is built on it."""
    idea = await get_idea(db, idea_id)

    team_result = await db.execute(select(Team.id).where(Team.idea_id == idea_id))
    if team_result.first() is not None:
        raise HTTPException(
            status_code=409,
            detail="A team is built on this idea; delete the team first",
        )

    await db.execute(delete(IdeaVote).where(IdeaVote.idea_id == idea_id))
    await db.delete(idea)
    await db.commit()


# ═══════════════════════════════════════════════════════════════
#  Voting ledger
# ═══════════════════════════════════════════════════════════════

async def count_user_votes(db: AsyncSession, idea_id: int, user_id: int) -> int:
    result = await db.execute(
        select(func.count(IdeaVote.id)).where(
            IdeaVote.idea_id == idea_id,
            IdeaVote.voter_id == user_id,
        )
    )
    return result.scalar() or 0


async def _recount(db: AsyncSession, idea: Idea) -> None:
    result = await db.execute(
        select(func.count(IdeaVote.id)).where(IdeaVote.idea_id == idea.id)
    )
    idea.vote_count = result.scalar() or 0


async def set_user_vote_count(db: AsyncSession, idea_id: int, user_id: int, target: int) -> int:
    """
    Make the user hold exactly ``clamp(target)`` tokens on the idea.

    Missing tokens are inserted; surplus tokens are removed newest-first so
    the oldest votes survive.  Returns the resulting count.
    """
    idea = await get_idea(db, idea_id)
    if idea.is_locked:
        raise HTTPException(status_code=400, detail="Idea is locked")

    target = clamp_votes(target)
    current = await count_user_votes(db, idea_id, user_id)
    diff = target - current
    if diff == 0:
        return current

    if diff > 0:
        db.add_all([IdeaVote(idea_id=idea_id, voter_id=user_id) for _ in range(diff)])
        await db.flush()
    else:
        newest = await db.execute(
            select(IdeaVote.id)
            .where(IdeaVote.idea_id == idea_id, IdeaVote.voter_id == user_id)
            .order_by(IdeaVote.created_at.desc(), IdeaVote.id.desc())
            .limit(-diff)
        )
        doomed = list(newest.scalars().all())
        await db.execute(delete(IdeaVote).where(IdeaVote.id.in_(doomed)))

    await _recount(db, idea)
    await db.commit()
    return target


async def vote_idea(db: AsyncSession, idea_id: int, user_id: int) -> int:
    """Add one token."""
    current = await count_user_votes(db, idea_id, user_id)
    if current >= settings.MAX_VOTES_PER_IDEA:
        raise HTTPException(status_code=400, detail="Vote limit reached")
    return await set_user_vote_count(db, idea_id, user_id, current + 1)


async def unvote_idea(db: AsyncSession, idea_id: int, user_id: int) -> int:
    """Withdraw every token the user holds on the idea."""
    return await set_user_vote_count(db, idea_id, user_id, 0)


async def user_vote_counts(db: AsyncSession, user_id: int) -> Dict[int, int]:
    result = await db.execute(
        select(IdeaVote.idea_id, func.count(IdeaVote.id))
        .where(IdeaVote.voter_id == user_id)
        .group_by(IdeaVote.idea_id)
    )
    return {idea_id: count for idea_id, count in result.all()}
