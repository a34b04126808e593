"""Program itinerary: days of a program and the points within each day.

Reads are public for active programs. Writes are allowed to the guide who
owns the program and to admins (admin-created programs have no guide).
"""
import logging
from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from tourmarket.errors import BadRequestError, ForbiddenError, NotFoundError
from tourmarket.models.program import Program, ProgramDay, ProgramPoint, PointType
from tourmarket.models.user import User

logger = logging.getLogger(__name__)

POINT_FIELDS = ("title", "description", "point_type", "order", "duration_minutes", "location")
REQUIRED_POINT_FIELDS = ("title", "point_type", "order")


def _active_program(db: Session, program_id: str) -> Program:
    program = db.query(Program).filter(Program.program_id == program_id, Program.is_active.is_(True)).first()
    if not program:
        raise NotFoundError("Program not found")
    return program


def _editable_program(db: Session, program_id: str, actor: User, action: str) -> Program:
    program = db.query(Program).filter(Program.program_id == program_id).first()
    if not program:
        raise NotFoundError("Program not found")
    owns = actor.guide is not None and program.guide_id == actor.guide.guide_id
    if not owns and not actor.is_admin:
        raise ForbiddenError(f"You are not authorized to {action} this program")
    return program


def _day(db: Session, program_id: str, day_id: str) -> ProgramDay:
    day = db.query(ProgramDay).filter(ProgramDay.day_id == day_id, ProgramDay.program_id == program_id).first()
    if not day:
        raise NotFoundError("Program day not found")
    return day


def _point(db: Session, day_id: str, point_id: str) -> ProgramPoint:
    point = db.query(ProgramPoint).filter(ProgramPoint.point_id == point_id, ProgramPoint.day_id == day_id).first()
    if not point:
        raise NotFoundError("Program point not found")
    return point


def _check_day_number(db: Session, program_id: str, day_number: Optional[int], exclude_day_id: str = None) -> None:
    if not day_number or day_number < 1:
        raise BadRequestError("Day number is required and must be a positive number")
    query = db.query(ProgramDay).filter(ProgramDay.program_id == program_id, ProgramDay.day_number == day_number)
    if exclude_day_id:
        query = query.filter(ProgramDay.day_id != exclude_day_id)
    if query.first():
        raise BadRequestError(f"Day number {day_number} already exists for this program")


# ---------------------------------------------------------------------------
# Days
# ---------------------------------------------------------------------------
def list_days(db: Session, program_id: str) -> list[ProgramDay]:
    _active_program(db, program_id)
    return db.query(ProgramDay).filter(ProgramDay.program_id == program_id).order_by(ProgramDay.day_number).all()


def get_day(db: Session, program_id: str, day_id: str) -> ProgramDay:
    _active_program(db, program_id)
    return _day(db, program_id, day_id)


def create_day(db: Session, program_id: str, actor: User, data: dict[str, Any]) -> ProgramDay:
    _editable_program(db, program_id, actor, "add days to")
    if not data.get("title"):
        raise BadRequestError("Day title is required")
    _check_day_number(db, program_id, data.get("day_number"))

    day = ProgramDay(
        program_id=program_id,
        day_number=data["day_number"],
        title=data["title"],
        description=data.get("description"),
    )
    db.add(day)
    db.commit()
    db.refresh(day)
    logger.info("Added day %d (%s) to program %s", day.day_number, day.day_id, program_id)
    return day


def update_day(db: Session, program_id: str, day_id: str, actor: User, patch: dict[str, Any]) -> ProgramDay:
    _editable_program(db, program_id, actor, "update days of")
    day = _day(db, program_id, day_id)

    if "title" in patch:
        if not patch["title"]:
            raise BadRequestError("Day title cannot be empty")
        day.title = patch["title"]
    if "description" in patch:
        day.description = patch["description"]
    if "day_number" in patch:
        _check_day_number(db, program_id, patch["day_number"], exclude_day_id=day_id)
        day.day_number = patch["day_number"]

    db.commit()
    db.refresh(day)
    logger.info("Updated day %s of program %s", day_id, program_id)
    return day


def delete_day(db: Session, program_id: str, day_id: str, actor: User) -> None:
    """Delete a day together with its points."""
    _editable_program(db, program_id, actor, "delete days from")
    day = _day(db, program_id, day_id)
    db.delete(day)
    db.commit()
    logger.info("Deleted day %s of program %s", day_id, program_id)


# ---------------------------------------------------------------------------
# Points
# ---------------------------------------------------------------------------
def list_points(db: Session, program_id: str, day_id: str) -> list[ProgramPoint]:
    _day(db, program_id, day_id)
    return db.query(ProgramPoint).filter(ProgramPoint.day_id == day_id).order_by(ProgramPoint.order).all()


def create_point(db: Session, program_id: str, day_id: str, actor: User, data: dict[str, Any]) -> ProgramPoint:
    _editable_program(db, program_id, actor, "add points to")
    _day(db, program_id, day_id)
    if not data.get("title"):
        raise BadRequestError("Point title is required")

    order = data.get("order")
    if not order:
        # append after the current last point
        highest = db.query(func.max(ProgramPoint.order)).filter(ProgramPoint.day_id == day_id).scalar()
        order = (highest or 0) + 1

    point = ProgramPoint(
        day_id=day_id,
        order=order,
        title=data["title"],
        description=data.get("description"),
        point_type=PointType(data.get("point_type") or PointType.ACTIVITY),
        duration_minutes=data.get("duration_minutes"),
        location=data.get("location"),
    )
    db.add(point)
    db.commit()
    db.refresh(point)
    logger.info("Added point %s at position %d to day %s", point.point_id, order, day_id)
    return point


def update_point(
    db: Session, program_id: str, day_id: str, point_id: str, actor: User, patch: dict[str, Any]
) -> ProgramPoint:
    _editable_program(db, program_id, actor, "update points of")
    _day(db, program_id, day_id)
    point = _point(db, day_id, point_id)

    for field in POINT_FIELDS:
        if field not in patch:
            continue
        value = patch[field]
        if field in REQUIRED_POINT_FIELDS and not value:
            raise BadRequestError(f"Field '{field}' cannot be empty")
        if field == "point_type":
            value = PointType(value)
        setattr(point, field, value)

    db.commit()
    db.refresh(point)
    logger.info("Updated point %s of day %s", point_id, day_id)
    return point


def delete_point(db: Session, program_id: str, day_id: str, point_id: str, actor: User) -> None:
    _editable_program(db, program_id, actor, "delete points from")
    _day(db, program_id, day_id)
    point = _point(db, day_id, point_id)
    db.delete(point)
    db.commit()
    logger.info("Deleted point %s of day %s", point_id, day_id)
