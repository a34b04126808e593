"""TokenTransaction ORM model: ledger behind Guide.token_balance."""
import uuid
import enum
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Enum as SAEnum
from tourmarket.database import Base
from tourmarket.utils import utcnow


class TransactionKind(str, enum.Enum):
    PURCHASE = "PURCHASE"
    USAGE = "USAGE"


class TokenTransaction(Base):
    __tablename__ = "token_transactions"

    transaction_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    guide_id = Column(String(36), ForeignKey("guides.guide_id"), nullable=False)
    kind = Column(SAEnum(TransactionKind), nullable=False)
    amount = Column(Integer, nullable=False)
    description = Column(String(500), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
