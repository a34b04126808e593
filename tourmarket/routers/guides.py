"""Guide profile API routes: registration and the dual-channel update."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tourmarket.database import get_db
from tourmarket.deps import get_current_user, require_guide_profile
from tourmarket.models.guide import Guide
from tourmarket.models.user import User
from tourmarket.schemas.guide import GuideRegister, GuideUpdate, GuideOut, GuideUpdateOut, ProgramBrief
from tourmarket.schemas.booking import ReviewOut
from tourmarket.services import guide_service, review_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=GuideOut, status_code=status.HTTP_201_CREATED)
def register_as_guide(payload: GuideRegister, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Create a guide profile awaiting admin approval."""
    return guide_service.register_as_guide(db, user.user_id, payload.model_dump())


@router.get("/me", response_model=GuideOut)
def get_my_guide_profile(guide: Guide = Depends(require_guide_profile)):
    return guide


@router.patch("/me", response_model=GuideUpdateOut)
def update_my_guide_profile(
    payload: GuideUpdate,
    guide: Guide = Depends(require_guide_profile),
    db: Session = Depends(get_db),
):
    """Contact details apply immediately; bio and new images go to admin review."""
    return guide_service.update_guide(db, guide.guide_id, guide.user_id, payload.model_dump(exclude_unset=True))


@router.get("/{guide_id}", response_model=GuideOut)
def get_guide(guide_id: str, db: Session = Depends(get_db)):
    return guide_service.get_guide(db, guide_id)


@router.get("/{guide_id}/programs", response_model=list[ProgramBrief])
def get_guide_programs(guide_id: str, db: Session = Depends(get_db)):
    return guide_service.get_guide_programs(db, guide_id)


@router.get("/{guide_id}/reviews", response_model=list[ReviewOut])
def get_guide_reviews(guide_id: str, db: Session = Depends(get_db)):
    return review_service.list_guide_reviews(db, guide_id)
