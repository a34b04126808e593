"""Pydantic schemas for guide profiles and profile change requests."""
from typing import Optional
from pydantic import BaseModel

from tourmarket.schemas.common import UTCDateTime

from tourmarket.models.guide import ChangeType, ChangeRequestStatus
from tourmarket.schemas.user import UserBrief


class GuideRegister(BaseModel):
    bio: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None


class GuideUpdate(BaseModel):
    # approval-gated
    bio: Optional[str] = None
    new_images: Optional[list[str]] = None
    # applied directly
    phone_number: Optional[str] = None
    email: Optional[str] = None
    is_active: Optional[bool] = None
    existing_images: Optional[list[str]] = None
    program_ids: Optional[list[str]] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None


class ProgramBrief(BaseModel):
    program_id: str
    title: str
    base_price: float
    duration_days: int

    model_config = {"from_attributes": True}


class GuideOut(BaseModel):
    guide_id: str
    user_id: str
    bio: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    images: list[str] = []
    is_active: bool
    is_approved: bool
    created_at: UTCDateTime
    user: UserBrief
    selected_programs: list[ProgramBrief] = []

    model_config = {"from_attributes": True}


class GuideUpdateOut(BaseModel):
    guide: GuideOut
    pending_changes: bool
    pending_change_message: Optional[str] = None
    change_request_id: Optional[str] = None


class ApprovalDecision(BaseModel):
    approved: bool


class ChangeRequestDecision(BaseModel):
    approve: bool
    admin_comment: Optional[str] = None


class ChangeRequestOut(BaseModel):
    request_id: str
    guide_id: str
    change_type: ChangeType
    proposed_bio: Optional[str] = None
    proposed_images: list[str] = []
    status: ChangeRequestStatus
    admin_comment: Optional[str] = None
    created_at: UTCDateTime
    resolved_at: Optional[UTCDateTime] = None

    model_config = {"from_attributes": True}
