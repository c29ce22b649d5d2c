"""Feedback router."""

from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from hacksite.database import get_db
from hacksite.models.feedback import FeedbackCategory, Severity
from hacksite.models.user import User
from hacksite.routers.auth import require_user
from hacksite.schemas.feedback import FeedbackOut
from hacksite.services import feedback as feedback_service

router = APIRouter(prefix="/feedback", tags=["feedback"])


@router.post("", response_model=FeedbackOut, status_code=201)
async def submit_feedback(
    category: FeedbackCategory = Form(...),
    description: str = Form(...),
    severity_str: Optional[str] = Form(None, alias="severity"),
    project_id: Optional[int] = Form(None),
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    # Parse severity manually because the empty "Select severity..." option causes 422
    severity = None
    if severity_str and severity_str.strip():
        try:
            severity = Severity(severity_str.strip())
        except ValueError:
            raise HTTPException(status_code=422, detail=f"Unknown severity: {severity_str}")

    return await feedback_service.submit_feedback(
        db, current_user.id, category, description, severity, project_id
    )
