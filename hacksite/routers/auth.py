"""
Authentication router: name-based sign-in + JWT cookies.

Attendees are identified by a self-chosen display name; there is no
password.  Judges and the admin get their own cookies, issued by the
judges and admin routers through the helpers below.

Endpoints:
    POST /auth/login   → find-or-create the user by name, set JWT cookie
    GET  /auth/logout  → clear JWT cookie
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import JSONResponse
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hacksite.config import settings
from hacksite.database import get_db
from hacksite.models.user import User
from hacksite.schemas.user import UserOut
from hacksite.services import identity

router = APIRouter(prefix="/auth", tags=["auth"])

COOKIE_KEY = "access_token"
JUDGE_COOKIE_KEY = "judge_token"
ADMIN_COOKIE_KEY = "admin_token"


# ═══════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════

def create_access_token(data: dict) -> str:
    """Create a signed JWT with an expiry claim."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def read_token(request: Request, cookie_key: str) -> Optional[dict]:
    """Decode the JWT stored under ``cookie_key``; None when absent or invalid."""
    token = request.cookies.get(cookie_key)
    if not token:
        return None
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


def set_token_cookie(response: JSONResponse, cookie_key: str, claims: dict) -> JSONResponse:
    """Attach a JWT cookie to a response."""
    response.set_cookie(
        key=cookie_key,
        value=create_access_token(claims),
        httponly=True,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        samesite="lax",
    )
    return response


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """
    Extract the JWT from the cookie, decode it, and return the User.
    Returns None when no valid token is present (allows public pages).
    """
    payload = read_token(request, COOKIE_KEY)
    if not payload:
        return None
    try:
        user_id = int(payload.get("sub", 0))
    except (TypeError, ValueError):
        return None
    if not user_id:
        return None

    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def require_user(current_user: Optional[User] = Depends(get_current_user)) -> User:
    if not current_user:
        raise HTTPException(status_code=401, detail="Login required")
    return current_user


# ═══════════════════════════════════════════════════════════════
#  Routes
# ═══════════════════════════════════════════════════════════════

@router.post("/login")
async def login(
    name: str = Form(...),
    db: AsyncSession = Depends(get_db),
):
    """Sign in as ``name``, creating the identity on first use."""
    user = await identity.login(db, name)
    response = JSONResponse(UserOut.model_validate(user).model_dump(mode="json"))
    return set_token_cookie(response, COOKIE_KEY, {"sub": str(user.id)})


@router.get("/logout")
async def logout():
    """Clear the auth cookie."""
    response = JSONResponse({"ok": True})
    response.delete_cookie(COOKIE_KEY)
    return response
