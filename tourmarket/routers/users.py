"""User API routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tourmarket.database import get_db
from tourmarket.deps import get_current_user
from tourmarket.models.user import User
from tourmarket.schemas.user import UserCreate, UserUpdate, UserOut, UserBrief
from tourmarket.services import user_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register_user(payload: UserCreate, db: Session = Depends(get_db)):
    """Register a Telegram user as a tourist."""
    return user_service.register_user(db, payload.model_dump())


@router.get("/me", response_model=UserOut)
def get_me(user: User = Depends(get_current_user)):
    return user


@router.patch("/me", response_model=UserOut)
def update_me(payload: UserUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Update the caller's profile (partial update)."""
    return user_service.update_user(db, user.user_id, payload.model_dump(exclude_unset=True))


@router.get("/{user_id}", response_model=UserBrief)
def get_user(user_id: str, db: Session = Depends(get_db)):
    """Public profile."""
    return user_service.get_user(db, user_id)
