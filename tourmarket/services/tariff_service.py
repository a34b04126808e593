"""Pricing tiers ("tariffs") attached to programs.

Tier ranges of one program never overlap. The overlap check runs with the
program row locked, in the same transaction as the write.
"""
import logging
from typing import Any

from sqlalchemy.orm import Session

from tourmarket.database import transaction
from tourmarket.errors import BadRequestError, ForbiddenError, NotFoundError
from tourmarket.models.booking import Booking
from tourmarket.models.program import Program, PricingTier

logger = logging.getLogger(__name__)


def _check_bounds(min_people: int, max_people: int, price: float) -> None:
    if min_people < 1:
        raise BadRequestError("Minimum people must be at least 1")
    if max_people < min_people:
        raise BadRequestError("Maximum people must be greater than or equal to minimum people")
    if price <= 0:
        raise BadRequestError("Price per person must be greater than 0")


def _check_overlap(db: Session, program_id: str, min_people: int, max_people: int, exclude_tier_id: str = None) -> None:
    query = db.query(PricingTier).filter(PricingTier.program_id == program_id)
    if exclude_tier_id:
        query = query.filter(PricingTier.tier_id != exclude_tier_id)
    for tier in query.all():
        if min_people <= tier.max_people and max_people >= tier.min_people:
            raise BadRequestError(
                f'This tier overlaps with existing tier "{tier.title}" ({tier.min_people}-{tier.max_people} people)'
            )


def _lock_program(db: Session, program_id: str) -> None:
    db.query(Program.program_id).filter(Program.program_id == program_id).with_for_update().first()


def _owned_tier(db: Session, tier_id: str, guide_id: str) -> PricingTier:
    tier = db.query(PricingTier).filter(PricingTier.tier_id == tier_id).first()
    if not tier:
        raise NotFoundError("Pricing tier not found")
    if tier.program.guide_id != guide_id:
        raise ForbiddenError("You are not authorized to modify this pricing tier")
    return tier


def list_tiers(db: Session, program_id: str) -> list[PricingTier]:
    if not db.query(Program).filter(Program.program_id == program_id).first():
        raise NotFoundError("Program not found")
    return (
        db.query(PricingTier)
        .filter(PricingTier.program_id == program_id)
        .order_by(PricingTier.min_people, PricingTier.price_per_person)
        .all()
    )


def create_tier(db: Session, program_id: str, guide_id: str, data: dict[str, Any]) -> PricingTier:
    program = db.query(Program).filter(Program.program_id == program_id, Program.guide_id == guide_id).first()
    if not program:
        raise NotFoundError("Program not found or you are not authorized to add pricing tiers to it")

    title = data.get("title")
    min_people = data.get("min_people")
    max_people = data.get("max_people")
    price = data.get("price_per_person")
    if not title or min_people is None or max_people is None or price is None:
        raise BadRequestError("Title, minimum people, maximum people, and price per person are required")
    _check_bounds(min_people, max_people, price)

    with transaction(db):
        _lock_program(db, program_id)
        _check_overlap(db, program_id, min_people, max_people)
        tier = PricingTier(
            program_id=program_id,
            title=title,
            description=data.get("description") or "",
            min_people=min_people,
            max_people=max_people,
            price_per_person=price,
            is_active=True,
        )
        db.add(tier)

    db.refresh(tier)
    logger.info("Created pricing tier %s (%d-%d @ %.2f) for program %s", tier.tier_id, min_people, max_people, price, program_id)
    return tier


def update_tier(db: Session, tier_id: str, guide_id: str, patch: dict[str, Any]) -> PricingTier:
    with transaction(db):
        tier = _owned_tier(db, tier_id, guide_id)
        _lock_program(db, tier.program_id)

        min_people = patch.get("min_people", tier.min_people)
        max_people = patch.get("max_people", tier.max_people)
        price = patch.get("price_per_person", tier.price_per_person)
        if min_people is None or max_people is None or price is None:
            raise BadRequestError("People counts and price cannot be empty")
        _check_bounds(min_people, max_people, price)
        _check_overlap(db, tier.program_id, min_people, max_people, exclude_tier_id=tier_id)

        if patch.get("title"):
            tier.title = patch["title"]
        if "description" in patch:
            tier.description = patch["description"] or ""
        tier.min_people = min_people
        tier.max_people = max_people
        tier.price_per_person = price

    db.refresh(tier)
    logger.info("Updated pricing tier %s", tier_id)
    return tier


def delete_tier(db: Session, tier_id: str, guide_id: str) -> None:
    with transaction(db):
        tier = _owned_tier(db, tier_id, guide_id)
        if db.query(Booking).filter(Booking.pricing_tier_id == tier_id).count() > 0:
            raise BadRequestError("Cannot delete a pricing tier that has associated bookings")
        db.delete(tier)
    logger.info("Deleted pricing tier %s", tier_id)


def toggle_tier(db: Session, tier_id: str, guide_id: str) -> PricingTier:
    tier = _owned_tier(db, tier_id, guide_id)
    tier.is_active = not tier.is_active
    db.commit()
    db.refresh(tier)
    logger.info("Pricing tier %s is now %s", tier_id, "active" if tier.is_active else "inactive")
    return tier
