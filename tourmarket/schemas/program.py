"""Pydantic schemas for programs, days/points and pricing tiers."""
from __future__ import annotations
from typing import Optional
from pydantic import BaseModel

from tourmarket.models.program import BookingType, PointType
from tourmarket.schemas.common import UTCDateTime


class PointIn(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    point_type: Optional[PointType] = None
    duration_minutes: Optional[int] = None
    location: Optional[str] = None


class DayIn(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    points: list[PointIn] = []


class TierIn(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    min_people: Optional[int] = None
    max_people: Optional[int] = None
    price_per_person: Optional[float] = None


class ProgramCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    base_price: Optional[float] = None
    duration_days: Optional[int] = None
    max_group_size: Optional[int] = None
    start_location: Optional[str] = None
    regions: list[str] = []
    tags: list[str] = []
    images: list[str] = []
    booking_type: BookingType = BookingType.BOTH
    days: list[DayIn] = []
    pricing_tiers: list[TierIn] = []


class ProgramUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    base_price: Optional[float] = None
    duration_days: Optional[int] = None
    max_group_size: Optional[int] = None
    start_location: Optional[str] = None
    regions: Optional[list[str]] = None
    tags: Optional[list[str]] = None
    images: Optional[list[str]] = None
    booking_type: Optional[BookingType] = None
    is_active: Optional[bool] = None


class DayCreate(BaseModel):
    day_number: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None


class DayUpdate(DayCreate):
    """Same fields as create; only the ones sent are applied."""


class PointCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    point_type: Optional[PointType] = None
    order: Optional[int] = None
    duration_minutes: Optional[int] = None
    location: Optional[str] = None


class PointUpdate(PointCreate):
    pass


class PointOut(BaseModel):
    point_id: str
    order: int
    title: str
    description: Optional[str] = None
    point_type: PointType
    duration_minutes: Optional[int] = None
    location: Optional[str] = None

    model_config = {"from_attributes": True}


class DayOut(BaseModel):
    day_id: str
    day_number: int
    title: str
    description: Optional[str] = None
    points: list[PointOut] = []

    model_config = {"from_attributes": True}


class TierOut(BaseModel):
    tier_id: str
    program_id: str
    title: str
    description: str
    min_people: int
    max_people: int
    price_per_person: float
    is_active: bool

    model_config = {"from_attributes": True}


class ProgramOut(BaseModel):
    program_id: str
    guide_id: Optional[str] = None
    title: str
    description: str
    base_price: float
    duration_days: int
    max_group_size: int
    start_location: str
    regions: list[str] = []
    tags: list[str] = []
    images: list[str] = []
    booking_type: BookingType
    is_active: bool
    is_approved: bool
    created_at: UTCDateTime
    days: list[DayOut] = []
    pricing_tiers: list[TierOut] = []

    model_config = {"from_attributes": True}


class ProgramApproval(BaseModel):
    approved: bool
