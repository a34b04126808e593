"""Request-scoped dependencies: caller identity and role checks.

Authentication happens upstream (Telegram Mini App init data); routes only
receive the already-authenticated ``actor_user_id``.
"""
from fastapi import Depends, Query
from sqlalchemy.orm import Session

from tourmarket.database import get_db
from tourmarket.errors import ForbiddenError, NotFoundError
from tourmarket.models.guide import Guide
from tourmarket.models.user import User


def get_current_user(
    actor_user_id: str = Query(..., description="ID of the authenticated user performing the request"),
    db: Session = Depends(get_db),
) -> User:
    user = db.query(User).filter(User.user_id == actor_user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def require_guide(user: User = Depends(get_current_user)) -> Guide:
    """Approved guides only; returns the caller's guide profile."""
    if not user.is_guide or not user.guide or not user.guide.is_approved:
        raise ForbiddenError("This action requires an approved guide")
    return user.guide


def require_guide_profile(user: User = Depends(get_current_user)) -> Guide:
    """Any guide profile, approved or not."""
    if not user.guide:
        raise ForbiddenError("User is not registered as a guide")
    return user.guide


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise ForbiddenError("Admin access required")
    return user


def require_super_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_super_admin:
        raise ForbiddenError("Super admin access required")
    return user
