"""Bid API routes for the bidding guide."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tourmarket.database import get_db
from tourmarket.deps import require_guide
from tourmarket.models.guide import Guide
from tourmarket.schemas.auction import BidOut
from tourmarket.services import auction_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/mine", response_model=list[BidOut])
def list_my_bids(guide: Guide = Depends(require_guide), db: Session = Depends(get_db)):
    return auction_service.get_bidder_bids(db, guide.user_id)


@router.delete("/{bid_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_bid(bid_id: str, guide: Guide = Depends(require_guide), db: Session = Depends(get_db)):
    """Withdraw a bid while its auction is still open."""
    auction_service.cancel_bid(db, bid_id, guide.user_id)
