"""
Winner resolution: the one-off routine behind the admin's "reveal" button.

Places go to the three best judges' scores; Hacker's Choice goes to the
most showcase votes.  A project may win both, in which case the category
column ends up as "Hacker's Choice" while the returned award list keeps
both entries.  Equal scores at a boundary fall back to the store's order.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hacksite.models.admin_phase import PhaseName
from hacksite.models.project import Project
from hacksite.services.phases import toggle_phase

logger = logging.getLogger(__name__)

PLACES = ["First Place", "Second Place", "Third Place"]
HACKERS_CHOICE = "Hacker's Choice"


async def reveal_winners(db: AsyncSession) -> List[dict]:
    awards: List[dict] = []

    # Get top projects by judges score
    top_judged = await db.execute(
        select(Project)
        .where(Project.judges_score.is_not(None))
        .order_by(Project.judges_score.desc())
        .limit(len(PLACES))
    )
    for place, project in zip(PLACES, top_judged.scalars().all()):
        project.is_winner = True
        project.winner_category = place
        awards.append({"project_id": project.id, "category": place})

    # Get top project by showcase votes
    top_showcase = await db.execute(
        select(Project).order_by(Project.showcase_vote_count.desc()).limit(1)
    )
    favourite = top_showcase.scalar_one_or_none()
    if favourite is not None:
        favourite.is_winner = True
        favourite.winner_category = HACKERS_CHOICE
        awards.append({"project_id": favourite.id, "category": HACKERS_CHOICE})

    await db.flush()
    await toggle_phase(db, PhaseName.WINNERS_REVEALED, True)

    logger.info("Winners revealed: %s", awards)
    return awards
