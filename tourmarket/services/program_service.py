"""Program catalog: programs with nested days/points and initial pricing tiers."""
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from tourmarket.database import transaction
from tourmarket.errors import BadRequestError, ForbiddenError, NotFoundError
from tourmarket.models.auction import Auction
from tourmarket.models.booking import Booking
from tourmarket.models.program import Program, ProgramDay, ProgramPoint, PricingTier, BookingType, PointType
from tourmarket.services import notification_service

logger = logging.getLogger(__name__)

REQUIRED_PROGRAM_FIELDS = ("title", "description", "base_price", "duration_days", "max_group_size", "start_location")
UPDATABLE_PROGRAM_FIELDS = REQUIRED_PROGRAM_FIELDS + ("regions", "tags", "images", "booking_type", "is_active")


def _build_days(days: list[dict[str, Any]]) -> list[ProgramDay]:
    built = []
    for day_number, day in enumerate(days, start=1):
        if not day.get("title"):
            raise BadRequestError(f"Day {day_number} needs a title")
        program_day = ProgramDay(day_number=day_number, title=day["title"], description=day.get("description"))
        for order, point in enumerate(day.get("points") or [], start=1):
            if not point.get("title"):
                raise BadRequestError(f"Point {order} of day {day_number} needs a title")
            program_day.points.append(ProgramPoint(
                order=order,
                title=point["title"],
                description=point.get("description"),
                point_type=PointType(point.get("point_type") or PointType.ACTIVITY),
                duration_minutes=point.get("duration_minutes"),
                location=point.get("location"),
            ))
        built.append(program_day)
    return built


def _build_tiers(tiers: list[dict[str, Any]]) -> list[PricingTier]:
    built: list[PricingTier] = []
    for tier in tiers:
        min_people, max_people = tier.get("min_people"), tier.get("max_people")
        price = tier.get("price_per_person")
        if min_people is None or max_people is None or not price or min_people < 1 or max_people < min_people:
            raise BadRequestError("Each pricing tier needs a valid people range and a positive price")
        for other in built:
            if min_people <= other.max_people and max_people >= other.min_people:
                raise BadRequestError("Pricing tiers must not overlap")
        built.append(PricingTier(
            title=tier.get("title") or f"{min_people}-{max_people} people",
            description=tier.get("description") or "",
            min_people=min_people,
            max_people=max_people,
            price_per_person=price,
            is_active=True,
        ))
    return built


def create_program(db: Session, guide_id: Optional[str], data: dict[str, Any]) -> Program:
    """Create a program (unapproved) with its days, points and tiers in one transaction.

    ``guide_id`` is None for programs created by an admin.
    """
    missing = [f for f in REQUIRED_PROGRAM_FIELDS if not data.get(f)]
    if missing:
        raise BadRequestError(f"Missing required program fields: {', '.join(missing)}")
    if not data.get("regions"):
        raise BadRequestError("At least one region must be specified")
    if not data.get("days"):
        raise BadRequestError("Program must have at least one day")

    with transaction(db):
        program = Program(
            guide_id=guide_id,
            title=data["title"],
            description=data["description"],
            base_price=data["base_price"],
            duration_days=data["duration_days"],
            max_group_size=data["max_group_size"],
            start_location=data["start_location"],
            regions=list(data["regions"]),
            tags=list(data.get("tags") or []),
            images=list(data.get("images") or []),
            booking_type=BookingType(data.get("booking_type") or BookingType.BOTH),
            is_active=True,
            is_approved=False,
        )
        program.days = _build_days(data["days"])
        program.pricing_tiers = _build_tiers(data.get("pricing_tiers") or [])
        db.add(program)
        db.flush()
        if guide_id:
            # the author offers its own program
            program.guide.selected_programs.append(program)

    db.refresh(program)
    logger.info("Created program '%s' (%s) for guide %s", program.title, program.program_id, guide_id)
    return program


def list_programs(db: Session, region: Optional[str] = None, tag: Optional[str] = None) -> list[Program]:
    """Bookable programs (active and approved), newest first."""
    programs = (
        db.query(Program)
        .filter(Program.is_active.is_(True), Program.is_approved.is_(True))
        .order_by(Program.created_at.desc())
        .all()
    )
    # regions/tags are JSON lists; filter portably in Python
    if region:
        programs = [p for p in programs if region in (p.regions or [])]
    if tag:
        programs = [p for p in programs if tag in (p.tags or [])]
    return programs


def get_program(db: Session, program_id: str) -> Program:
    program = db.query(Program).filter(Program.program_id == program_id).first()
    if not program:
        raise NotFoundError("Program not found")
    return program


def _owned_program(db: Session, program_id: str, guide_id: str) -> Program:
    program = get_program(db, program_id)
    if program.guide_id != guide_id:
        raise ForbiddenError("You are not authorized to modify this program")
    return program


def update_program(db: Session, program_id: str, guide_id: str, patch: dict[str, Any]) -> Program:
    program = _owned_program(db, program_id, guide_id)
    for field in UPDATABLE_PROGRAM_FIELDS:
        if field not in patch:
            continue
        value = patch[field]
        if value is None or (field in REQUIRED_PROGRAM_FIELDS and not value):
            raise BadRequestError(f"Field '{field}' cannot be empty")
        if field == "booking_type":
            value = BookingType(value)
        setattr(program, field, value)
    db.commit()
    db.refresh(program)
    logger.info("Updated program %s", program_id)
    return program


def delete_program(db: Session, program_id: str, guide_id: str) -> None:
    program = _owned_program(db, program_id, guide_id)
    if db.query(Booking).filter(Booking.program_id == program_id).count() > 0:
        raise BadRequestError("Cannot delete a program that has bookings; deactivate it instead")
    if db.query(Auction).filter(Auction.program_id == program_id).count() > 0:
        raise BadRequestError("Cannot delete a program that auctions refer to; deactivate it instead")
    db.delete(program)
    db.commit()
    logger.info("Deleted program %s", program_id)


def set_program_approval(db: Session, program_id: str, approved: bool) -> Program:
    program = get_program(db, program_id)
    program.is_approved = approved
    db.commit()
    db.refresh(program)
    logger.info("Program %s approval set to %s", program_id, approved)

    if program.guide:
        verdict = "approved and is now bookable" if approved else "not approved"
        notification_service.notify_user(db, program.guide.user_id, f"Your program '{program.title}' was {verdict}.")
    return program
