"""Auction and Bid ORM models."""
import uuid
import enum
from sqlalchemy import (
    Column, String, Text, Boolean, Integer, Float, DateTime, ForeignKey, Index, UniqueConstraint, Enum as SAEnum,
)
from sqlalchemy.orm import relationship
from tourmarket.database import Base
from tourmarket.utils import utcnow


class AuctionStatus(str, enum.Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class Auction(Base):
    __tablename__ = "auctions"
    __table_args__ = (Index("ix_auctions_status_expires_at", "status", "expires_at"),)

    auction_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    creator_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    program_id = Column(String(36), ForeignKey("programs.program_id"), nullable=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String(255), nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False)
    number_of_people = Column(Integer, nullable=False)
    budget = Column(Float, nullable=True)
    status = Column(SAEnum(AuctionStatus), nullable=False, default=AuctionStatus.OPEN)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    creator = relationship("User")
    program = relationship("Program")
    bids = relationship(
        "Bid", back_populates="auction", cascade="all, delete-orphan",
        order_by=lambda: (Bid.price.desc(), Bid.created_at),
    )


class Bid(Base):
    __tablename__ = "bids"
    __table_args__ = (UniqueConstraint("auction_id", "bidder_id", name="uq_bids_auction_bidder"),)

    bid_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    auction_id = Column(String(36), ForeignKey("auctions.auction_id"), nullable=False)
    bidder_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    price = Column(Float, nullable=False)
    description = Column(Text, nullable=False)
    is_accepted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    auction = relationship("Auction", back_populates="bids")
    bidder = relationship("User")
