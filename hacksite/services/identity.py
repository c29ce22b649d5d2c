"""Identity resolver: maps a display name to a persistent user row."""

from datetime import datetime, timezone

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hacksite.models.user import User

NAME_TAKEN = "This name is already taken. Please choose another."


async def login(db: AsyncSession, name: str) -> User:
    """Return the user with this name, creating one on first sight."""
    trimmed = (name or "").strip()
    if not trimmed:
        raise HTTPException(status_code=400, detail="Name cannot be empty")

    result = await db.execute(select(User).where(User.name == trimmed).limit(1))
    user = result.scalar_one_or_none()

    if user is None:
        user = User(name=trimmed)
        db.add(user)
        try:
            await db.commit()
        except IntegrityError:
            # Someone registered the same name between our select and insert
            await db.rollback()
            raise HTTPException(status_code=409, detail=NAME_TAKEN)
        await db.refresh(user)

    user.last_seen_at = datetime.now(timezone.utc)
    await db.commit()
    return user


async def touch(db: AsyncSession, user_id: int) -> User:
    """Load a returning user and bump ``last_seen_at``."""
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    user.last_seen_at = datetime.now(timezone.utc)
    await db.commit()
    return user
