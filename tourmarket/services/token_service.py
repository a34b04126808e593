"""Guide usage tokens: balance on the guide row, history in the ledger.

Payment capture happens outside this service; ``purchase_tokens`` is called
once a payment is confirmed.
"""
import logging

from sqlalchemy.orm import Session

from tourmarket.database import transaction
from tourmarket.errors import BadRequestError, NotFoundError
from tourmarket.models.guide import Guide
from tourmarket.models.token import TokenTransaction, TransactionKind

logger = logging.getLogger(__name__)


def _locked_guide(db: Session, guide_id: str) -> Guide:
    guide = db.query(Guide).filter(Guide.guide_id == guide_id).with_for_update().first()
    if not guide:
        raise NotFoundError("Guide not found")
    return guide


def purchase_tokens(db: Session, guide_id: str, amount: int) -> TokenTransaction:
    if amount <= 0:
        raise BadRequestError("Token amount must be positive")
    with transaction(db):
        guide = _locked_guide(db, guide_id)
        guide.token_balance += amount
        entry = TokenTransaction(
            guide_id=guide_id, kind=TransactionKind.PURCHASE, amount=amount, description="Token purchase",
        )
        db.add(entry)
    db.refresh(entry)
    logger.info("Guide %s purchased %d tokens", guide_id, amount)
    return entry


def use_tokens(db: Session, guide_id: str, amount: int, description: str = "") -> TokenTransaction:
    if amount <= 0:
        raise BadRequestError("Token amount must be positive")
    with transaction(db):
        guide = _locked_guide(db, guide_id)
        if guide.token_balance < amount:
            raise BadRequestError(f"Insufficient tokens: balance {guide.token_balance}, requested {amount}")
        guide.token_balance -= amount
        entry = TokenTransaction(
            guide_id=guide_id, kind=TransactionKind.USAGE, amount=amount, description=description or "",
        )
        db.add(entry)
    db.refresh(entry)
    logger.info("Guide %s used %d tokens (%s)", guide_id, amount, description)
    return entry


def get_balance(db: Session, guide_id: str) -> int:
    guide = db.query(Guide).filter(Guide.guide_id == guide_id).first()
    if not guide:
        raise NotFoundError("Guide not found")
    return guide.token_balance


def list_transactions(db: Session, guide_id: str) -> list[TokenTransaction]:
    return (
        db.query(TokenTransaction)
        .filter(TokenTransaction.guide_id == guide_id)
        .order_by(TokenTransaction.created_at.desc())
        .all()
    )
