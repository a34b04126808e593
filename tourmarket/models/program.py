"""Program catalog ORM models: programs, their days/points and pricing tiers."""
import uuid
import enum
from sqlalchemy import Column, String, Text, Boolean, Integer, Float, DateTime, JSON, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from tourmarket.database import Base


class BookingType(str, enum.Enum):
    DIRECT_ONLY = "DIRECT_ONLY"
    AUCTION_ONLY = "AUCTION_ONLY"
    BOTH = "BOTH"


class PointType(str, enum.Enum):
    ACTIVITY = "ACTIVITY"
    SIGHTSEEING = "SIGHTSEEING"
    MEAL = "MEAL"
    TRANSFER = "TRANSFER"
    ACCOMMODATION = "ACCOMMODATION"


class Program(Base):
    __tablename__ = "programs"

    program_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    guide_id = Column(String(36), ForeignKey("guides.guide_id"), nullable=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    base_price = Column(Float, nullable=False)
    duration_days = Column(Integer, nullable=False)
    max_group_size = Column(Integer, nullable=False)
    start_location = Column(String(255), nullable=False)
    regions = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)
    images = Column(JSON, nullable=False, default=list)
    booking_type = Column(SAEnum(BookingType), nullable=False, default=BookingType.BOTH)
    is_active = Column(Boolean, nullable=False, default=True)
    is_approved = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    guide = relationship("Guide", foreign_keys=[guide_id])
    guides = relationship("Guide", secondary="guide_programs", back_populates="selected_programs")
    days = relationship(
        "ProgramDay", back_populates="program", cascade="all, delete-orphan",
        order_by="ProgramDay.day_number",
    )
    pricing_tiers = relationship(
        "PricingTier", back_populates="program", cascade="all, delete-orphan",
        order_by="PricingTier.min_people",
    )


class ProgramDay(Base):
    __tablename__ = "program_days"

    day_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    program_id = Column(String(36), ForeignKey("programs.program_id"), nullable=False)
    day_number = Column(Integer, nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    program = relationship("Program", back_populates="days")
    points = relationship(
        "ProgramPoint", back_populates="day", cascade="all, delete-orphan",
        order_by="ProgramPoint.order",
    )


class ProgramPoint(Base):
    __tablename__ = "program_points"

    point_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    day_id = Column(String(36), ForeignKey("program_days.day_id"), nullable=False)
    order = Column(Integer, nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    point_type = Column(SAEnum(PointType), nullable=False, default=PointType.ACTIVITY)
    duration_minutes = Column(Integer, nullable=True)
    location = Column(String(255), nullable=True)

    day = relationship("ProgramDay", back_populates="points")


class PricingTier(Base):
    __tablename__ = "pricing_tiers"

    tier_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    program_id = Column(String(36), ForeignKey("programs.program_id"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    min_people = Column(Integer, nullable=False)
    max_people = Column(Integer, nullable=False)
    price_per_person = Column(Float, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    program = relationship("Program", back_populates="pricing_tiers")

    def covers(self, number_of_people: int) -> bool:
        return self.min_people <= number_of_people <= self.max_people
