"""Guide profile and profile change request ORM models."""
import uuid
import enum
from sqlalchemy import Column, String, Text, Boolean, Integer, DateTime, JSON, ForeignKey, Table, Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from tourmarket.database import Base
from tourmarket.utils import utcnow


guide_programs = Table(
    "guide_programs",
    Base.metadata,
    Column("guide_id", String(36), ForeignKey("guides.guide_id", ondelete="CASCADE"), primary_key=True),
    Column("program_id", String(36), ForeignKey("programs.program_id", ondelete="CASCADE"), primary_key=True),
)


class Guide(Base):
    __tablename__ = "guides"

    guide_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, unique=True)
    bio = Column(Text, nullable=True)
    phone_number = Column(String(32), nullable=True)
    email = Column(String(255), nullable=True)
    images = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    is_approved = Column(Boolean, nullable=False, default=False)
    token_balance = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="guide")
    selected_programs = relationship("Program", secondary=guide_programs, back_populates="guides")


class ChangeType(str, enum.Enum):
    BIO_UPDATE = "BIO_UPDATE"
    IMAGES_UPDATE = "IMAGES_UPDATE"
    BIO_AND_IMAGES_UPDATE = "BIO_AND_IMAGES_UPDATE"
    MULTIPLE_CHANGES = "MULTIPLE_CHANGES"


class ChangeRequestStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class GuideProfileChangeRequest(Base):
    __tablename__ = "guide_profile_change_requests"

    request_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    guide_id = Column(String(36), ForeignKey("guides.guide_id"), nullable=False)
    change_type = Column(SAEnum(ChangeType), nullable=False)
    proposed_bio = Column(Text, nullable=True)
    proposed_images = Column(JSON, nullable=False, default=list)
    status = Column(SAEnum(ChangeRequestStatus), nullable=False, default=ChangeRequestStatus.PENDING)
    admin_comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    resolved_at = Column(DateTime(timezone=True), nullable=True)

    guide = relationship("Guide")
