"""Ideas router: idea submissions and multi-token voting."""

from typing import List

from fastapi import APIRouter, Depends, Form
from sqlalchemy.ext.asyncio import AsyncSession

from hacksite.database import get_db
from hacksite.models.admin_phase import PhaseName
from hacksite.models.user import User
from hacksite.routers.auth import require_user
from hacksite.routers.changes import get_change_feed
from hacksite.routers.phases import require_phase
from hacksite.schemas.idea import IdeaOut, VoteCountOut
from hacksite.services import ideas as idea_service
from hacksite.services.change_feed import ChangeFeed

router = APIRouter(prefix="/ideas", tags=["ideas"])


async def _vote_response(db: AsyncSession, feed: ChangeFeed, idea_id: int, count: int) -> VoteCountOut:
    idea = await idea_service.get_idea(db, idea_id)
    await feed.publish("idea_votes", idea_id, vote_count=idea.vote_count)
    return VoteCountOut(idea_id=idea_id, currentCount=count, vote_count=idea.vote_count)


# ═══════════════════════════════════════════════════════════════
#  GET /ideas → all ideas, most voted first
# ═══════════════════════════════════════════════════════════════

@router.get("", response_model=List[IdeaOut])
async def list_ideas(db: AsyncSession = Depends(get_db)):
    return await idea_service.list_ideas(db)


@router.get("/top", response_model=List[IdeaOut])
async def top_ideas(db: AsyncSession = Depends(get_db)):
    """Ideas eligible for team formation."""
    return await idea_service.top_ideas(db)


@router.get("/votes/mine")
async def my_votes(
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Token counts the signed-in user holds, keyed by idea id."""
    counts = await idea_service.user_vote_counts(db, current_user.id)
    return {str(idea_id): n for idea_id, n in counts.items()}


# ═══════════════════════════════════════════════════════════════
#  POST /ideas → submit an idea
# ═══════════════════════════════════════════════════════════════

@router.post(
    "",
    response_model=IdeaOut,
    status_code=201,
    dependencies=[Depends(require_phase(PhaseName.IDEAS_OPEN))],
)
async def submit_idea(
    title: str = Form(...),
    description: str = Form(...),
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    idea = await idea_service.submit_idea(db, title, description, current_user.id)
    await feed.publish("ideas", idea.id, "INSERT")
    return idea


# ═══════════════════════════════════════════════════════════════
#  POST /ideas/{idea_id}/votes → set the user's token count (0-5)
# ═══════════════════════════════════════════════════════════════

@router.post(
    "/{idea_id}/votes",
    response_model=VoteCountOut,
    dependencies=[Depends(require_phase(PhaseName.IDEAS_VOTING))],
)
async def set_vote_count(
    idea_id: int,
    count: int = Form(...),
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    current = await idea_service.set_user_vote_count(db, idea_id, current_user.id, count)
    return await _vote_response(db, feed, idea_id, current)


@router.post(
    "/{idea_id}/vote",
    response_model=VoteCountOut,
    dependencies=[Depends(require_phase(PhaseName.IDEAS_VOTING))],
)
async def vote(
    idea_id: int,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    current = await idea_service.vote_idea(db, idea_id, current_user.id)
    return await _vote_response(db, feed, idea_id, current)


@router.post(
    "/{idea_id}/unvote",
    response_model=VoteCountOut,
    dependencies=[Depends(require_phase(PhaseName.IDEAS_VOTING))],
)
async def unvote(
    idea_id: int,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    current = await idea_service.unvote_idea(db, idea_id, current_user.id)
    return await _vote_response(db, feed, idea_id, current)
