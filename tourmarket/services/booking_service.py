"""Booking engine: direct bookings and pricing-tier resolution."""
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from tourmarket.errors import BadRequestError, ForbiddenError, NotFoundError
from tourmarket.models.booking import Booking, BookingStatus
from tourmarket.models.program import Program, PricingTier, BookingType
from tourmarket.models.user import User
from tourmarket.services import notification_service
from tourmarket.utils import as_utc

logger = logging.getLogger(__name__)

CANCELLABLE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


def resolve_price(program: Program, number_of_people: int, pricing_tier_id: Optional[str] = None) -> tuple[Optional[PricingTier], float]:
    """Pick the tier and per-person price for a group size.

    An explicit tier must belong to the program and cover the group size.
    Without one, the first active tier covering the group wins; the program's
    base price is the fallback.
    """
    if pricing_tier_id:
        tier = next((t for t in program.pricing_tiers if t.tier_id == pricing_tier_id), None)
        if not tier:
            raise BadRequestError("Specified pricing tier not found")
        if not tier.covers(number_of_people):
            raise BadRequestError(
                f"Number of people ({number_of_people}) doesn't match the selected pricing tier "
                f"({tier.min_people}-{tier.max_people})"
            )
        return tier, tier.price_per_person

    for tier in program.pricing_tiers:
        if tier.is_active and tier.covers(number_of_people):
            return tier, tier.price_per_person
    return None, program.base_price


def _guide_user_id(program: Program) -> Optional[str]:
    return program.guide.user_id if program.guide_id and program.guide else None


def _owns_program(actor: User, booking: Booking) -> bool:
    return bool(actor.guide and booking.program.guide_id == actor.guide.guide_id)


def create_booking(db: Session, tourist_id: str, data: dict[str, Any]) -> Booking:
    program_id = data.get("program_id")
    start_date = data.get("start_date")
    number_of_people = data.get("number_of_people")
    if not program_id or not start_date or not number_of_people:
        raise BadRequestError("Program ID, start date, and number of people are required")
    if number_of_people < 1:
        raise BadRequestError("Number of people must be at least 1")

    program = (
        db.query(Program)
        .filter(Program.program_id == program_id, Program.is_active.is_(True), Program.is_approved.is_(True))
        .first()
    )
    if not program:
        raise NotFoundError("Program not found or not available for booking")
    if program.booking_type == BookingType.AUCTION_ONLY:
        raise BadRequestError("This program can only be booked through an auction")

    tier, price_per_person = resolve_price(program, number_of_people, data.get("pricing_tier_id"))

    booking = Booking(
        program_id=program.program_id,
        tourist_id=tourist_id,
        pricing_tier_id=tier.tier_id if tier else None,
        start_date=as_utc(start_date),
        number_of_people=number_of_people,
        price_per_person=price_per_person,
        total_price=price_per_person * number_of_people,
        status=BookingStatus.PENDING,
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    logger.info(
        "Created booking %s for program %s: %d people at %.2f",
        booking.booking_id, program.program_id, number_of_people, price_per_person,
    )

    guide_user_id = _guide_user_id(program)
    if guide_user_id:
        notification_service.notify_user(
            db, guide_user_id,
            f"📅 New booking request for '{program.title}' ({number_of_people} people).",
        )
    return booking


def get_booking(db: Session, booking_id: str, actor: User) -> Booking:
    booking = db.query(Booking).filter(Booking.booking_id == booking_id).first()
    if not booking:
        raise NotFoundError("Booking not found")
    if booking.tourist_id != actor.user_id and not _owns_program(actor, booking) and not actor.is_admin:
        raise ForbiddenError("You are not authorized to view this booking")
    return booking


def get_user_bookings(db: Session, actor: User) -> list[Booking]:
    """Bookings the actor made, or for guides the bookings of their programs."""
    query = db.query(Booking)
    if actor.is_guide and actor.guide:
        query = query.join(Program).filter(Program.guide_id == actor.guide.guide_id)
    else:
        query = query.filter(Booking.tourist_id == actor.user_id)
    return query.order_by(Booking.created_at.desc()).all()


def update_booking_status(db: Session, booking_id: str, actor: User, new_status: Any) -> Booking:
    try:
        new_status = BookingStatus(new_status)
    except ValueError:
        raise BadRequestError("Invalid booking status")

    booking = db.query(Booking).filter(Booking.booking_id == booking_id).first()
    if not booking:
        raise NotFoundError("Booking not found")

    if booking.tourist_id == actor.user_id:
        if new_status != BookingStatus.CANCELLED:
            raise ForbiddenError("Tourists can only cancel bookings")
        counterpart = _guide_user_id(booking.program)
    elif _owns_program(actor, booking):
        if new_status == BookingStatus.PENDING:
            raise BadRequestError("Cannot set booking back to pending status")
        counterpart = booking.tourist_id
    else:
        raise ForbiddenError("You are not authorized to update this booking")

    booking.status = new_status
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s set to %s by user %s", booking_id, new_status.value, actor.user_id)

    if counterpart:
        notification_service.notify_user(
            db, counterpart,
            f"ℹ️ Booking for '{booking.program.title}' is now {new_status.value.lower()}.",
        )
    return booking


def cancel_booking(db: Session, booking_id: str, actor: User) -> Booking:
    booking = db.query(Booking).filter(Booking.booking_id == booking_id).first()
    if not booking:
        raise NotFoundError("Booking not found")
    if booking.tourist_id != actor.user_id:
        raise ForbiddenError("Only the tourist who made the booking can cancel it")
    if booking.status not in CANCELLABLE_STATUSES:
        raise BadRequestError(f"Cannot cancel a booking with status {booking.status.value}")

    booking.status = BookingStatus.CANCELLED
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s cancelled by tourist %s", booking_id, actor.user_id)
    return booking
