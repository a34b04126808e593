"""Guide token API routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tourmarket.database import get_db
from tourmarket.deps import require_guide
from tourmarket.models.guide import Guide
from tourmarket.schemas.token import TokenPurchase, TokenUsage, TokenTransactionOut, TokenBalanceOut
from tourmarket.services import token_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/balance", response_model=TokenBalanceOut)
def get_balance(guide: Guide = Depends(require_guide), db: Session = Depends(get_db)):
    return TokenBalanceOut(guide_id=guide.guide_id, balance=token_service.get_balance(db, guide.guide_id))


@router.get("/transactions", response_model=list[TokenTransactionOut])
def list_transactions(guide: Guide = Depends(require_guide), db: Session = Depends(get_db)):
    return token_service.list_transactions(db, guide.guide_id)


@router.post("/purchase", response_model=TokenTransactionOut, status_code=status.HTTP_201_CREATED)
def purchase_tokens(payload: TokenPurchase, guide: Guide = Depends(require_guide), db: Session = Depends(get_db)):
    """Credit tokens after the payment provider has confirmed the charge."""
    return token_service.purchase_tokens(db, guide.guide_id, payload.amount)


@router.post("/use", response_model=TokenTransactionOut, status_code=status.HTTP_201_CREATED)
def use_tokens(payload: TokenUsage, guide: Guide = Depends(require_guide), db: Session = Depends(get_db)):
    return token_service.use_tokens(db, guide.guide_id, payload.amount, payload.description or "")
