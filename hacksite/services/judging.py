"""
Judge ranking ledger.

Each judge hands out ranks 1, 2 and 3 at most once each, to distinct
projects.  Assigning a rank that is already held elsewhere moves it.
"""

import logging
from typing import Dict, Iterable, List, Optional

from fastapi import HTTPException
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hacksite.models.judge_vote import RANK_POINTS, RANKS, JudgeVote
from hacksite.models.project import Project
from hacksite.services.projects import get_project

logger = logging.getLogger(__name__)


async def judge_votes(db: AsyncSession, judge_name: str) -> Dict[int, int]:
    """Current picks of one judge as {project_id: rank}."""
    result = await db.execute(
        select(JudgeVote.project_id, JudgeVote.rank).where(JudgeVote.judge_name == judge_name)
    )
    return {project_id: rank for project_id, rank in result.all()}


async def _recount(db: AsyncSession, project_ids: Iterable[int]) -> None:
    """Rewrite judge_vote_count as the weighted sum of ranks across judges."""
    for project_id in set(project_ids):
        result = await db.execute(
            select(JudgeVote.rank, func.count(JudgeVote.id))
            .where(JudgeVote.project_id == project_id)
            .group_by(JudgeVote.rank)
        )
        points = sum(RANK_POINTS[rank] * n for rank, n in result.all())
        project = await db.get(Project, project_id)
        if project is not None:
            project.judge_vote_count = points


async def handle_rank_change(
    db: AsyncSession,
    project_id: int,
    judge_name: str,
    rank: Optional[int],
) -> Dict[int, int]:
    """
    Give ``project_id`` the judge's ``rank``, or clear its rank when ``rank`` is None.

    Moving a rank runs as: free the rank on whichever project holds it, drop
    the target project's previous rank, insert the new pick.  All three
    steps share one transaction.  Returns the judge's picks afterwards.
    """
    if rank is not None and rank not in RANKS:
        raise HTTPException(status_code=400, detail="Rank must be 1, 2 or 3")

    await get_project(db, project_id)
    current = await judge_votes(db, judge_name)
    current_rank = current.get(project_id)
    touched = {project_id}

    if rank is None:
        if current_rank is None:
            return current
        await db.execute(
            delete(JudgeVote).where(
                JudgeVote.project_id == project_id,
                JudgeVote.judge_name == judge_name,
            )
        )
    else:
        if rank == current_rank:
            return current

        # 1. Free the rank if another project holds it
        holder = next((pid for pid, r in current.items() if r == rank and pid != project_id), None)
        if holder is not None:
            await db.execute(
                delete(JudgeVote).where(
                    JudgeVote.judge_name == judge_name,
                    JudgeVote.rank == rank,
                )
            )
            touched.add(holder)

        # 2. A project holds at most one rank per judge
        if current_rank is not None:
            await db.execute(
                delete(JudgeVote).where(
                    JudgeVote.project_id == project_id,
                    JudgeVote.judge_name == judge_name,
                )
            )

        # 3. Record the new pick
        db.add(JudgeVote(project_id=project_id, judge_name=judge_name, rank=rank))

    try:
        await db.flush()
        await _recount(db, touched)
        await db.commit()
    except IntegrityError:
        # A concurrent request from the same judge got there first; its picks stand
        await db.rollback()
        logger.warning("Rank change for project %s by %s lost a race", project_id, judge_name)
        return await judge_votes(db, judge_name)
    return await judge_votes(db, judge_name)


async def vote_rank(db: AsyncSession, project_id: int, judge_name: str, rank: int) -> Dict[int, int]:
    return await handle_rank_change(db, project_id, judge_name, rank)


async def unvote_rank(db: AsyncSession, project_id: int, judge_name: str) -> Dict[int, int]:
    return await handle_rank_change(db, project_id, judge_name, None)


async def projects_for_judging(db: AsyncSession) -> List[Project]:
    result = await db.execute(
        select(Project).order_by(Project.judge_vote_count.desc(), Project.submitted_at.desc())
    )
    return list(result.scalars().all())
