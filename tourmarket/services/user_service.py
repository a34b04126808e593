"""User accounts keyed by Telegram id."""
import logging
from typing import Any

from sqlalchemy.orm import Session

from tourmarket.errors import BadRequestError, NotFoundError
from tourmarket.models.user import User, Role

logger = logging.getLogger(__name__)

UPDATABLE_USER_FIELDS = ("first_name", "last_name", "username", "language_code")


def register_user(db: Session, data: dict[str, Any]) -> User:
    """Register a Telegram user. Everyone starts as a TOURIST."""
    telegram_id = str(data.get("telegram_id") or "").strip()
    if not telegram_id or not data.get("first_name"):
        raise BadRequestError("Telegram id and first name are required")
    if db.query(User).filter(User.telegram_id == telegram_id).first():
        raise BadRequestError("User with this Telegram id is already registered")

    user = User(
        telegram_id=telegram_id,
        first_name=data["first_name"],
        last_name=data.get("last_name"),
        username=data.get("username"),
        language_code=data.get("language_code"),
        role=Role.TOURIST,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s (telegram %s)", user.user_id, telegram_id)
    return user


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def update_user(db: Session, user_id: str, patch: dict[str, Any]) -> User:
    user = get_user(db, user_id)
    for field in UPDATABLE_USER_FIELDS:
        if field in patch:
            if field == "first_name" and not patch[field]:
                raise BadRequestError("First name cannot be empty")
            setattr(user, field, patch[field])
    db.commit()
    db.refresh(user)
    logger.info("Updated user %s", user_id)
    return user


def set_role(db: Session, user_id: str, role: Role) -> User:
    """Grant or revoke admin roles. Guide/tourist roles follow guide approval instead."""
    if role not in (Role.ADMIN, Role.SUPER_ADMIN, Role.TOURIST):
        raise BadRequestError("Guide role is granted through guide approval")
    user = get_user(db, user_id)
    if role == Role.TOURIST and user.guide and user.guide.is_approved:
        role = Role.GUIDE
    user.role = role
    db.commit()
    db.refresh(user)
    logger.info("User %s role set to %s", user_id, role.value)
    return user
