"""Reviews: only tourists who completed a program may review it, once."""
import logging
from typing import Any

from sqlalchemy.orm import Session

from tourmarket.errors import BadRequestError, ForbiddenError, NotFoundError
from tourmarket.models.booking import Booking, BookingStatus, Review
from tourmarket.models.program import Program

logger = logging.getLogger(__name__)


def create_review(db: Session, tourist_id: str, data: dict[str, Any]) -> Review:
    program_id = data.get("program_id")
    rating = data.get("rating")
    if not program_id or rating is None:
        raise BadRequestError("Program ID and rating are required")
    if not 1 <= rating <= 5:
        raise BadRequestError("Rating must be between 1 and 5")

    program = db.query(Program).filter(Program.program_id == program_id, Program.is_active.is_(True)).first()
    if not program:
        raise NotFoundError("Program not found")

    completed = (
        db.query(Booking)
        .filter(
            Booking.program_id == program_id,
            Booking.tourist_id == tourist_id,
            Booking.status == BookingStatus.COMPLETED,
        )
        .first()
    )
    if not completed:
        raise BadRequestError("You can only review programs you have completed")

    existing = (
        db.query(Review)
        .filter(Review.program_id == program_id, Review.tourist_id == tourist_id, Review.active.is_(True))
        .first()
    )
    if existing:
        raise BadRequestError("You have already reviewed this program")

    review = Review(
        program_id=program_id,
        tourist_id=tourist_id,
        guide_id=program.guide_id,
        rating=rating,
        comment=data.get("comment") or "",
        active=True,
    )
    db.add(review)
    db.commit()
    db.refresh(review)
    logger.info("Tourist %s reviewed program %s (%d stars)", tourist_id, program_id, rating)
    return review


def list_program_reviews(db: Session, program_id: str) -> list[Review]:
    if not db.query(Program).filter(Program.program_id == program_id).first():
        raise NotFoundError("Program not found")
    return (
        db.query(Review)
        .filter(Review.program_id == program_id, Review.active.is_(True))
        .order_by(Review.created_at.desc())
        .all()
    )


def list_guide_reviews(db: Session, guide_id: str) -> list[Review]:
    return (
        db.query(Review)
        .filter(Review.guide_id == guide_id, Review.active.is_(True))
        .order_by(Review.created_at.desc())
        .all()
    )


def delete_review(db: Session, review_id: str, tourist_id: str) -> None:
    """Soft delete: the review stays in the table with ``active = False``."""
    review = db.query(Review).filter(Review.review_id == review_id, Review.active.is_(True)).first()
    if not review:
        raise NotFoundError("Review not found")
    if review.tourist_id != tourist_id:
        raise ForbiddenError("You can only delete your own reviews")
    review.active = False
    db.commit()
    logger.info("Review %s deactivated", review_id)
