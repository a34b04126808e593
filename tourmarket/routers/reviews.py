"""Review API routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tourmarket.database import get_db
from tourmarket.deps import get_current_user
from tourmarket.models.user import User
from tourmarket.schemas.booking import ReviewCreate, ReviewOut
from tourmarket.services import review_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=ReviewOut, status_code=status.HTTP_201_CREATED)
def create_review(payload: ReviewCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return review_service.create_review(db, user.user_id, payload.model_dump())


@router.get("/guide/{guide_id}", response_model=list[ReviewOut])
def list_guide_reviews(guide_id: str, db: Session = Depends(get_db)):
    return review_service.list_guide_reviews(db, guide_id)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(review_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    review_service.delete_review(db, review_id, user.user_id)
