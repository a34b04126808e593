"""Pricing tier API routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tourmarket.database import get_db
from tourmarket.deps import require_guide
from tourmarket.models.guide import Guide
from tourmarket.schemas.program import TierIn, TierOut
from tourmarket.services import tariff_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/program/{program_id}", response_model=list[TierOut])
def list_tiers(program_id: str, db: Session = Depends(get_db)):
    return tariff_service.list_tiers(db, program_id)


@router.post("/program/{program_id}", response_model=TierOut, status_code=status.HTTP_201_CREATED)
def create_tier(program_id: str, payload: TierIn, guide: Guide = Depends(require_guide), db: Session = Depends(get_db)):
    return tariff_service.create_tier(db, program_id, guide.guide_id, payload.model_dump())


@router.patch("/{tier_id}", response_model=TierOut)
def update_tier(tier_id: str, payload: TierIn, guide: Guide = Depends(require_guide), db: Session = Depends(get_db)):
    return tariff_service.update_tier(db, tier_id, guide.guide_id, payload.model_dump(exclude_unset=True))


@router.post("/{tier_id}/toggle", response_model=TierOut)
def toggle_tier(tier_id: str, guide: Guide = Depends(require_guide), db: Session = Depends(get_db)):
    return tariff_service.toggle_tier(db, tier_id, guide.guide_id)


@router.delete("/{tier_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tier(tier_id: str, guide: Guide = Depends(require_guide), db: Session = Depends(get_db)):
    tariff_service.delete_tier(db, tier_id, guide.guide_id)
