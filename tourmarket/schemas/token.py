"""Pydantic schemas for guide tokens."""
from typing import Optional
from pydantic import BaseModel

from tourmarket.schemas.common import UTCDateTime

from tourmarket.models.token import TransactionKind


class TokenPurchase(BaseModel):
    amount: int


class TokenUsage(BaseModel):
    amount: int
    description: Optional[str] = None


class TokenTransactionOut(BaseModel):
    transaction_id: str
    guide_id: str
    kind: TransactionKind
    amount: int
    description: str
    created_at: UTCDateTime

    model_config = {"from_attributes": True}


class TokenBalanceOut(BaseModel):
    guide_id: str
    balance: int
