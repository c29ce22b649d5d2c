"""Users router – public identity lookups."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hacksite.database import get_db
from hacksite.models.user import User
from hacksite.routers.auth import require_user
from hacksite.schemas.user import UserOut
from hacksite.services import identity

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserOut)
async def read_me(
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Return the signed-in user's identity and mark them as seen."""
    return await identity.touch(db, current_user.id)


@router.get("/{user_id}", response_model=UserOut)
async def read_user(user_id: int, db: AsyncSession = Depends(get_db)):
    """Get a public user profile by ID."""
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
