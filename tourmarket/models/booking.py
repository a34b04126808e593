"""Booking and Review ORM models."""
import uuid
import enum
from sqlalchemy import Column, String, Text, Boolean, Integer, Float, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship
from tourmarket.database import Base
from tourmarket.utils import utcnow


class BookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class Booking(Base):
    __tablename__ = "bookings"

    booking_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    program_id = Column(String(36), ForeignKey("programs.program_id"), nullable=False)
    tourist_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    pricing_tier_id = Column(String(36), ForeignKey("pricing_tiers.tier_id"), nullable=True)
    start_date = Column(DateTime(timezone=True), nullable=False)
    number_of_people = Column(Integer, nullable=False)
    price_per_person = Column(Float, nullable=False)
    total_price = Column(Float, nullable=False)
    status = Column(SAEnum(BookingStatus), nullable=False, default=BookingStatus.PENDING)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    program = relationship("Program")
    tourist = relationship("User")
    pricing_tier = relationship("PricingTier")


class Review(Base):
    __tablename__ = "reviews"

    review_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    program_id = Column(String(36), ForeignKey("programs.program_id"), nullable=False)
    tourist_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    guide_id = Column(String(36), ForeignKey("guides.guide_id"), nullable=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False, default="")
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    tourist = relationship("User")
