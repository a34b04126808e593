"""Pydantic schemas for Bookings and Reviews."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from tourmarket.schemas.common import UTCDateTime

from tourmarket.models.booking import BookingStatus


class BookingCreate(BaseModel):
    program_id: Optional[str] = None
    start_date: Optional[datetime] = None
    number_of_people: Optional[int] = None
    pricing_tier_id: Optional[str] = None


class BookingStatusUpdate(BaseModel):
    status: str


class BookingOut(BaseModel):
    booking_id: str
    program_id: str
    tourist_id: str
    pricing_tier_id: Optional[str] = None
    start_date: UTCDateTime
    number_of_people: int
    price_per_person: float
    total_price: float
    status: BookingStatus
    created_at: UTCDateTime

    model_config = {"from_attributes": True}


class ReviewCreate(BaseModel):
    program_id: Optional[str] = None
    rating: Optional[int] = None
    comment: Optional[str] = None


class ReviewOut(BaseModel):
    review_id: str
    program_id: str
    tourist_id: str
    guide_id: Optional[str] = None
    rating: int
    comment: str
    created_at: UTCDateTime

    model_config = {"from_attributes": True}
