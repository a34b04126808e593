"""Program day and point API routes, nested under a program."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tourmarket.database import get_db
from tourmarket.deps import get_current_user
from tourmarket.models.user import User
from tourmarket.schemas.program import DayCreate, DayUpdate, DayOut, PointCreate, PointUpdate, PointOut
from tourmarket.services import itinerary_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/{program_id}/days", response_model=list[DayOut])
def list_days(program_id: str, db: Session = Depends(get_db)):
    return itinerary_service.list_days(db, program_id)


@router.get("/{program_id}/days/{day_id}", response_model=DayOut)
def get_day(program_id: str, day_id: str, db: Session = Depends(get_db)):
    return itinerary_service.get_day(db, program_id, day_id)


@router.post("/{program_id}/days", response_model=DayOut, status_code=status.HTTP_201_CREATED)
def create_day(
    program_id: str,
    payload: DayCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return itinerary_service.create_day(db, program_id, user, payload.model_dump())


@router.patch("/{program_id}/days/{day_id}", response_model=DayOut)
def update_day(
    program_id: str,
    day_id: str,
    payload: DayUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return itinerary_service.update_day(db, program_id, day_id, user, payload.model_dump(exclude_unset=True))


@router.delete("/{program_id}/days/{day_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_day(program_id: str, day_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Removes the day and all of its points."""
    itinerary_service.delete_day(db, program_id, day_id, user)


@router.get("/{program_id}/days/{day_id}/points", response_model=list[PointOut])
def list_points(program_id: str, day_id: str, db: Session = Depends(get_db)):
    return itinerary_service.list_points(db, program_id, day_id)


@router.post("/{program_id}/days/{day_id}/points", response_model=PointOut, status_code=status.HTTP_201_CREATED)
def create_point(
    program_id: str,
    day_id: str,
    payload: PointCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Without an explicit ``order`` the point goes to the end of the day."""
    return itinerary_service.create_point(db, program_id, day_id, user, payload.model_dump())


@router.patch("/{program_id}/days/{day_id}/points/{point_id}", response_model=PointOut)
def update_point(
    program_id: str,
    day_id: str,
    point_id: str,
    payload: PointUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return itinerary_service.update_point(
        db, program_id, day_id, point_id, user, payload.model_dump(exclude_unset=True)
    )


@router.delete("/{program_id}/days/{day_id}/points/{point_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_point(
    program_id: str,
    day_id: str,
    point_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    itinerary_service.delete_point(db, program_id, day_id, point_id, user)
