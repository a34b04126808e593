"""Pydantic schemas for Auctions and Bids."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from tourmarket.schemas.common import UTCDateTime

from tourmarket.models.auction import AuctionStatus
from tourmarket.schemas.user import UserBrief


class AuctionCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[datetime] = None
    number_of_people: Optional[int] = None
    budget: Optional[float] = None
    program_id: Optional[str] = None
    expires_at: Optional[datetime] = None


class AuctionUpdate(AuctionCreate):
    """Same fields as create; only the ones sent are applied."""


class AuctionClose(BaseModel):
    winning_bid_id: Optional[str] = None


class BidCreate(BaseModel):
    price: Optional[float] = None
    description: Optional[str] = None


class BidOut(BaseModel):
    bid_id: str
    auction_id: str
    bidder_id: str
    price: float
    description: str
    is_accepted: bool
    created_at: UTCDateTime
    bidder: UserBrief

    model_config = {"from_attributes": True}


class AuctionOut(BaseModel):
    auction_id: str
    creator_id: str
    program_id: Optional[str] = None
    title: str
    description: str
    location: str
    start_date: UTCDateTime
    number_of_people: int
    budget: Optional[float] = None
    status: AuctionStatus
    expires_at: UTCDateTime
    created_at: UTCDateTime
    bids: list[BidOut] = []

    model_config = {"from_attributes": True}


class AuctionCloseOut(BaseModel):
    auction: AuctionOut
    accepted_bid: Optional[BidOut] = None


class BiddedAuctionOut(BaseModel):
    auction: AuctionOut
    bids: list[BidOut] = []


class HighestBidOut(BaseModel):
    auction: AuctionOut
    highest_bid: Optional[BidOut] = None
    has_bids: bool
    bid_count: int
