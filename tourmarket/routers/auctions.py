"""Auction and bid API routes: delegates to auction_service."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tourmarket.database import get_db
from tourmarket.deps import get_current_user, require_guide
from tourmarket.models.guide import Guide
from tourmarket.models.user import User
from tourmarket.schemas.auction import (
    AuctionCreate, AuctionUpdate, AuctionClose, AuctionOut, AuctionCloseOut,
    BidCreate, BidOut, BiddedAuctionOut, HighestBidOut,
)
from tourmarket.services import auction_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/active", response_model=list[AuctionOut])
def list_active_auctions(db: Session = Depends(get_db)):
    """Open, unexpired auctions, soonest-expiring first."""
    return auction_service.list_active_auctions(db)


@router.get("/mine", response_model=list[AuctionOut])
def list_my_auctions(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return auction_service.get_auctions_by_creator(db, user.user_id)


@router.get("/mine/highest-bids", response_model=list[HighestBidOut])
def highest_bids(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Highest bid and bid count for each of the caller's open auctions."""
    return auction_service.get_highest_bid_per_auction(db, user.user_id)


@router.get("/bidded", response_model=list[BiddedAuctionOut])
def list_bidded_auctions(guide: Guide = Depends(require_guide), db: Session = Depends(get_db)):
    return auction_service.get_bidded_auctions(db, guide.user_id)


@router.get("/program/{program_id}", response_model=list[AuctionOut])
def list_program_auctions(program_id: str, db: Session = Depends(get_db)):
    return auction_service.get_program_auctions(db, program_id)


@router.get("/{auction_id}", response_model=AuctionOut)
def get_auction(auction_id: str, db: Session = Depends(get_db)):
    return auction_service.get_auction(db, auction_id)


@router.post("/", response_model=AuctionOut, status_code=status.HTTP_201_CREATED)
def create_auction(payload: AuctionCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return auction_service.create_auction(db, user.user_id, payload.model_dump())


@router.put("/{auction_id}", response_model=AuctionOut)
def update_auction(
    auction_id: str,
    payload: AuctionUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Creator-only; refused once the first bid has arrived."""
    return auction_service.update_auction(db, auction_id, user.user_id, payload.model_dump(exclude_unset=True))


@router.delete("/{auction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_auction(auction_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    auction_service.delete_auction(db, auction_id, user.user_id)


@router.post("/{auction_id}/close", response_model=AuctionCloseOut)
def close_auction(
    auction_id: str,
    payload: AuctionClose,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return auction_service.close_auction(db, auction_id, user.user_id, payload.winning_bid_id)


@router.get("/{auction_id}/bids", response_model=list[BidOut])
def list_auction_bids(auction_id: str, db: Session = Depends(get_db)):
    return auction_service.get_auction_bids(db, auction_id)


@router.post("/{auction_id}/bids", response_model=BidOut, status_code=status.HTTP_201_CREATED)
def place_bid(
    auction_id: str,
    payload: BidCreate,
    guide: Guide = Depends(require_guide),
    db: Session = Depends(get_db),
):
    """Approved guides bid on open auctions, one bid each."""
    return auction_service.place_bid(db, auction_id, guide.user_id, payload.model_dump())
