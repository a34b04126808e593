"""Auction engine: time-boxed auctions, bid placement and winner selection.

Rules enforced here:
- Bids are accepted only while an auction is OPEN and ``expires_at`` is in
  the future. Expiry is never stored; it is recomputed on every read.
- An auction is frozen the moment it receives its first bid: no update, no
  delete.
- Closing marks at most one bid as accepted and always moves the auction
  to CLOSED.
- One bid per (auction, bidder), backed by a unique constraint.
"""
import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tourmarket.database import transaction
from tourmarket.errors import BadRequestError, NotFoundError
from tourmarket.models.auction import Auction, AuctionStatus, Bid
from tourmarket.models.program import Program, BookingType
from tourmarket.utils import as_utc, utcnow

logger = logging.getLogger(__name__)

REQUIRED_AUCTION_FIELDS = ("title", "description", "location", "start_date", "number_of_people", "expires_at")
UPDATABLE_AUCTION_FIELDS = ("title", "description", "location", "start_date", "number_of_people", "budget")


def _validate_expires_at(expires_at: datetime) -> datetime:
    expires_at = as_utc(expires_at)
    if expires_at <= utcnow():
        raise BadRequestError("Expiration date must be in the future")
    return expires_at


def _validate_program(db: Session, program_id: str) -> Program:
    program = db.query(Program).filter(Program.program_id == program_id).first()
    if not program:
        raise NotFoundError("Program not found")
    if program.booking_type == BookingType.DIRECT_ONLY:
        raise BadRequestError("This program only allows direct booking, not auctions")
    return program


def _open_auctions_query(db: Session):
    return db.query(Auction).filter(
        Auction.status == AuctionStatus.OPEN,
        Auction.expires_at > utcnow(),
    )


def _owned_auction_for_update(db: Session, auction_id: str, creator_id: str, action: str) -> Auction:
    """Load and row-lock the creator's auction, then check it is still mutable."""
    auction = (
        db.query(Auction)
        .filter(Auction.auction_id == auction_id, Auction.creator_id == creator_id)
        .with_for_update()
        .first()
    )
    if not auction:
        raise NotFoundError(f"Auction not found or you are not authorized to {action} it")

    bid_count = db.query(func.count(Bid.bid_id)).filter(Bid.auction_id == auction_id).scalar()
    if bid_count > 0:
        raise BadRequestError(f"Cannot {action} auction once bids have been placed")
    if auction.status != AuctionStatus.OPEN:
        raise BadRequestError(f"Cannot {action} auction with status {auction.status.value}")
    return auction


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
def list_active_auctions(db: Session) -> list[Auction]:
    """All biddable auctions, soonest-expiring first."""
    return _open_auctions_query(db).order_by(Auction.expires_at).all()


def get_auction(db: Session, auction_id: str) -> Auction:
    auction = db.query(Auction).filter(Auction.auction_id == auction_id).first()
    if not auction:
        raise NotFoundError("Auction not found")
    return auction


def get_program_auctions(db: Session, program_id: str) -> list[Auction]:
    return _open_auctions_query(db).filter(Auction.program_id == program_id).order_by(Auction.expires_at).all()


def get_auctions_by_creator(db: Session, creator_id: str) -> list[Auction]:
    return db.query(Auction).filter(Auction.creator_id == creator_id).order_by(Auction.expires_at).all()


def get_bidded_auctions(db: Session, bidder_id: str) -> list[dict[str, Any]]:
    """Distinct auctions the bidder has bid on, open first then soonest-expiring.

    Each entry carries only the bidder's own bids.
    """
    bidded_ids = db.query(Bid.auction_id).filter(Bid.bidder_id == bidder_id).distinct()
    open_first = case((Auction.status == AuctionStatus.OPEN, 0), else_=1)
    auctions = (
        db.query(Auction)
        .filter(Auction.auction_id.in_(bidded_ids))
        .order_by(open_first, Auction.expires_at)
        .all()
    )
    return [
        {"auction": auction, "bids": [b for b in auction.bids if b.bidder_id == bidder_id]}
        for auction in auctions
    ]


def get_auction_bids(db: Session, auction_id: str) -> list[Bid]:
    get_auction(db, auction_id)
    return (
        db.query(Bid)
        .filter(Bid.auction_id == auction_id)
        .order_by(Bid.price.desc(), Bid.created_at)
        .all()
    )


def get_bidder_bids(db: Session, bidder_id: str) -> list[Bid]:
    return db.query(Bid).filter(Bid.bidder_id == bidder_id).order_by(Bid.created_at.desc()).all()


def get_highest_bid_per_auction(db: Session, creator_id: str) -> list[dict[str, Any]]:
    """For each OPEN auction owned by the creator: highest bid and bid count."""
    auctions = (
        db.query(Auction)
        .filter(Auction.creator_id == creator_id, Auction.status == AuctionStatus.OPEN)
        .order_by(Auction.expires_at)
        .all()
    )
    summary = []
    for auction in auctions:
        # relationship is already ordered price desc, created_at asc
        highest = auction.bids[0] if auction.bids else None
        summary.append({
            "auction": auction,
            "highest_bid": highest,
            "has_bids": highest is not None,
            "bid_count": len(auction.bids),
        })
    return summary


# ---------------------------------------------------------------------------
# Auction lifecycle
# ---------------------------------------------------------------------------
def create_auction(db: Session, creator_id: str, data: dict[str, Any]) -> Auction:
    missing = [f for f in REQUIRED_AUCTION_FIELDS if not data.get(f)]
    if missing:
        raise BadRequestError(f"Missing required fields for auction creation: {', '.join(missing)}")

    expires_at = _validate_expires_at(data["expires_at"])

    program_id = data.get("program_id")
    if program_id:
        _validate_program(db, program_id)

    auction = Auction(
        creator_id=creator_id,
        title=data["title"],
        description=data["description"],
        location=data["location"],
        start_date=as_utc(data["start_date"]),
        number_of_people=data["number_of_people"],
        budget=data.get("budget") or None,
        program_id=program_id or None,
        status=AuctionStatus.OPEN,
        expires_at=expires_at,
    )
    db.add(auction)
    db.commit()
    db.refresh(auction)
    logger.info("Created auction '%s' (%s) by user %s", auction.title, auction.auction_id, creator_id)
    return auction


def update_auction(db: Session, auction_id: str, creator_id: str, patch: dict[str, Any]) -> Auction:
    """Patch an auction that has not received any bid yet."""
    with transaction(db):
        auction = _owned_auction_for_update(db, auction_id, creator_id, "update")

        for field in UPDATABLE_AUCTION_FIELDS:
            if field not in patch:
                continue
            value = patch[field]
            if field == "budget":
                value = value or None
            elif not value:
                raise BadRequestError(f"Field '{field}' cannot be empty")
            elif field == "start_date":
                value = as_utc(value)
            setattr(auction, field, value)

        if "program_id" in patch:
            if patch["program_id"]:
                _validate_program(db, patch["program_id"])
                auction.program_id = patch["program_id"]
            else:
                auction.program_id = None

        if "expires_at" in patch:
            if patch["expires_at"] is None:
                raise BadRequestError("Expiration date cannot be removed")
            auction.expires_at = _validate_expires_at(patch["expires_at"])

    db.refresh(auction)
    logger.info("Updated auction %s", auction_id)
    return auction


def delete_auction(db: Session, auction_id: str, creator_id: str) -> None:
    with transaction(db):
        auction = _owned_auction_for_update(db, auction_id, creator_id, "delete")
        db.delete(auction)
    logger.info("Deleted auction %s", auction_id)


def close_auction(db: Session, auction_id: str, creator_id: str, winning_bid_id: Optional[str] = None) -> dict[str, Any]:
    """Close an OPEN auction, optionally accepting one of its bids."""
    with transaction(db):
        auction = (
            db.query(Auction)
            .filter(
                Auction.auction_id == auction_id,
                Auction.creator_id == creator_id,
                Auction.status == AuctionStatus.OPEN,
            )
            .with_for_update()
            .first()
        )
        if not auction:
            raise NotFoundError("Active auction not found or you are not authorized to close it")

        accepted: Optional[Bid] = None
        if winning_bid_id:
            accepted = (
                db.query(Bid)
                .filter(Bid.bid_id == winning_bid_id, Bid.auction_id == auction_id)
                .first()
            )
            if not accepted:
                raise BadRequestError("Invalid winning bid selected")

        for bid in auction.bids:
            bid.is_accepted = accepted is not None and bid.bid_id == accepted.bid_id
        auction.status = AuctionStatus.CLOSED

    db.refresh(auction)
    logger.info("Closed auction %s (winning bid: %s)", auction_id, winning_bid_id or "none")
    return {"auction": auction, "accepted_bid": accepted}


# ---------------------------------------------------------------------------
# Bids
# ---------------------------------------------------------------------------
def place_bid(db: Session, auction_id: str, bidder_id: str, data: dict[str, Any]) -> Bid:
    price = data.get("price")
    description = (data.get("description") or "").strip()
    if not price or not description:
        raise BadRequestError("Price and description are required")
    if price < 0:
        raise BadRequestError("Price must be positive")

    with transaction(db):
        auction = (
            _open_auctions_query(db)
            .filter(Auction.auction_id == auction_id)
            .with_for_update()
            .first()
        )
        if not auction:
            raise NotFoundError("Active auction not found")
        if auction.creator_id == bidder_id:
            raise BadRequestError("You cannot bid on your own auction")

        existing = (
            db.query(Bid)
            .filter(Bid.auction_id == auction_id, Bid.bidder_id == bidder_id)
            .first()
        )
        if existing:
            raise BadRequestError("You already have a bid on this auction. Please update your existing bid instead.")

        bid = Bid(
            auction_id=auction_id,
            bidder_id=bidder_id,
            price=float(price),
            description=description,
            is_accepted=False,
        )
        db.add(bid)
        try:
            db.flush()
        except IntegrityError:
            # concurrent first bid from the same bidder won the race
            raise BadRequestError("You already have a bid on this auction. Please update your existing bid instead.")

    db.refresh(bid)
    logger.info("User %s bid %.2f on auction %s", bidder_id, bid.price, auction_id)
    return bid


def cancel_bid(db: Session, bid_id: str, bidder_id: str) -> None:
    """Withdraw a bid. A withdrawn high bid is simply gone; nothing is re-ranked."""
    with transaction(db):
        bid = db.query(Bid).filter(Bid.bid_id == bid_id, Bid.bidder_id == bidder_id).first()
        if not bid:
            raise NotFoundError("Bid not found or you are not authorized to cancel it")
        if bid.auction.status != AuctionStatus.OPEN:
            raise BadRequestError("Cannot cancel bid on a closed auction")
        auction_id = bid.auction_id
        db.delete(bid)
    logger.info("Cancelled bid %s on auction %s", bid_id, auction_id)
