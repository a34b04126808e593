"""Program catalog API routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tourmarket.database import get_db
from tourmarket.deps import require_guide
from tourmarket.models.guide import Guide
from tourmarket.schemas.program import ProgramCreate, ProgramUpdate, ProgramOut
from tourmarket.schemas.booking import ReviewOut
from tourmarket.services import program_service, review_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=list[ProgramOut])
def list_programs(
    region: Optional[str] = Query(None),
    tag: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Bookable programs, optionally filtered by region or tag."""
    return program_service.list_programs(db, region=region, tag=tag)


@router.get("/{program_id}", response_model=ProgramOut)
def get_program(program_id: str, db: Session = Depends(get_db)):
    return program_service.get_program(db, program_id)


@router.get("/{program_id}/reviews", response_model=list[ReviewOut])
def list_program_reviews(program_id: str, db: Session = Depends(get_db)):
    return review_service.list_program_reviews(db, program_id)


@router.post("/", response_model=ProgramOut, status_code=status.HTTP_201_CREATED)
def create_program(payload: ProgramCreate, guide: Guide = Depends(require_guide), db: Session = Depends(get_db)):
    """Create a program with its days and tiers. It stays hidden until an admin approves it."""
    return program_service.create_program(db, guide.guide_id, payload.model_dump())


@router.patch("/{program_id}", response_model=ProgramOut)
def update_program(
    program_id: str,
    payload: ProgramUpdate,
    guide: Guide = Depends(require_guide),
    db: Session = Depends(get_db),
):
    return program_service.update_program(db, program_id, guide.guide_id, payload.model_dump(exclude_unset=True))


@router.delete("/{program_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_program(program_id: str, guide: Guide = Depends(require_guide), db: Session = Depends(get_db)):
    program_service.delete_program(db, program_id, guide.guide_id)
