"""Pydantic schemas for Users."""
from typing import Optional
from pydantic import BaseModel

from tourmarket.schemas.common import UTCDateTime

from tourmarket.models.user import Role


class UserCreate(BaseModel):
    telegram_id: str
    first_name: str
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None


class UserUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None


class UserOut(BaseModel):
    user_id: str
    telegram_id: str
    first_name: str
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None
    role: Role
    is_guide: bool
    is_admin: bool
    created_at: UTCDateTime

    model_config = {"from_attributes": True}


class UserBrief(BaseModel):
    user_id: str
    first_name: str
    last_name: Optional[str] = None
    username: Optional[str] = None

    model_config = {"from_attributes": True}


class RoleUpdate(BaseModel):
    role: Role
