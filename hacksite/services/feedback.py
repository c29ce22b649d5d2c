"""Feedback submissions."""

from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hacksite.models.feedback import Feedback, FeedbackCategory, Severity
from hacksite.services.projects import get_project


async def submit_feedback(
    db: AsyncSession,
    user_id: int,
    category: FeedbackCategory,
    description: str,
    severity: Optional[Severity] = None,
    project_id: Optional[int] = None,
) -> Feedback:
    description = (description or "").strip()
    if not description:
        raise HTTPException(status_code=400, detail="Description is required")
    if project_id is not None:
        await get_project(db, project_id)

    entry = Feedback(
        user_id=user_id,
        project_id=project_id,
        category=FeedbackCategory(category),
        description=description,
        severity=Severity(severity) if severity else None,
    )
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    return entry


async def list_feedback(db: AsyncSession) -> List[Feedback]:
    result = await db.execute(select(Feedback).order_by(Feedback.created_at.desc(), Feedback.id.desc()))
    return list(result.scalars().all())


async def delete_feedback(db: AsyncSession, feedback_id: int) -> None:
    result = await db.execute(select(Feedback).where(Feedback.id == feedback_id))
    entry = result.scalar_one_or_none()
    if not entry:
        raise HTTPException(status_code=404, detail="Feedback not found")
    await db.delete(entry)
    await db.commit()
