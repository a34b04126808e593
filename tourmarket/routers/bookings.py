"""Booking API routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tourmarket.database import get_db
from tourmarket.deps import get_current_user
from tourmarket.models.user import User
from tourmarket.schemas.booking import BookingCreate, BookingStatusUpdate, BookingOut
from tourmarket.services import booking_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=BookingOut, status_code=status.HTTP_201_CREATED)
def create_booking(payload: BookingCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Book a program directly; price comes from the matching pricing tier."""
    return booking_service.create_booking(db, user.user_id, payload.model_dump())


@router.get("/", response_model=list[BookingOut])
def list_bookings(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return booking_service.get_user_bookings(db, user)


@router.get("/{booking_id}", response_model=BookingOut)
def get_booking(booking_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return booking_service.get_booking(db, booking_id, user)


@router.patch("/{booking_id}/status", response_model=BookingOut)
def update_booking_status(
    booking_id: str,
    payload: BookingStatusUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return booking_service.update_booking_status(db, booking_id, user, payload.status)


@router.post("/{booking_id}/cancel", response_model=BookingOut)
def cancel_booking(booking_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return booking_service.cancel_booking(db, booking_id, user)
