"""User ORM model: one account per Telegram user, role-based capabilities."""
import enum
import uuid
from sqlalchemy import Column, String, DateTime, Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from tourmarket.database import Base


class Role(str, enum.Enum):
    TOURIST = "TOURIST"
    GUIDE = "GUIDE"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    telegram_id = Column(String(32), nullable=False, unique=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=True)
    username = Column(String(100), nullable=True)
    language_code = Column(String(10), nullable=True)
    role = Column(SAEnum(Role), nullable=False, default=Role.TOURIST)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    guide = relationship("Guide", back_populates="user", uselist=False)

    # Capabilities are derived from the single role value.
    @property
    def is_tourist(self) -> bool:
        return self.role == Role.TOURIST

    @property
    def is_guide(self) -> bool:
        return self.role == Role.GUIDE

    @property
    def is_admin(self) -> bool:
        return self.role in (Role.ADMIN, Role.SUPER_ADMIN)

    @property
    def is_super_admin(self) -> bool:
        return self.role == Role.SUPER_ADMIN
