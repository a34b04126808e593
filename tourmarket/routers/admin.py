"""Admin API routes: guide approval, profile change review, program approval."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tourmarket.database import get_db
from tourmarket.deps import require_admin, require_super_admin
from tourmarket.models.user import User
from tourmarket.schemas.guide import GuideOut, ApprovalDecision, ChangeRequestDecision, ChangeRequestOut
from tourmarket.schemas.program import ProgramCreate, ProgramOut, ProgramApproval
from tourmarket.schemas.user import UserOut, RoleUpdate
from tourmarket.services import guide_service, program_service, user_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/guides/pending", response_model=list[GuideOut])
def list_pending_guides(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return guide_service.list_pending_guide_approvals(db)


@router.patch("/guides/{guide_id}/approval", response_model=GuideOut)
def set_guide_approval(
    guide_id: str,
    payload: ApprovalDecision,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Approve or revoke a guide; the owner's role follows in the same transaction."""
    return guide_service.update_guide_approval_status(db, guide_id, payload.approved)


@router.get("/change-requests", response_model=list[ChangeRequestOut])
def list_change_requests(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return guide_service.list_pending_change_requests(db)


@router.patch("/change-requests/{request_id}", response_model=ChangeRequestOut)
def process_change_request(
    request_id: str,
    payload: ChangeRequestDecision,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return guide_service.process_change_request(db, request_id, payload.approve, payload.admin_comment)


@router.post("/programs", response_model=ProgramOut, status_code=201)
def create_program(payload: ProgramCreate, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Programs created by admins have no owning guide."""
    return program_service.create_program(db, None, payload.model_dump())


@router.patch("/programs/{program_id}/approval", response_model=ProgramOut)
def set_program_approval(
    program_id: str,
    payload: ProgramApproval,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return program_service.set_program_approval(db, program_id, payload.approved)


@router.patch("/users/{user_id}/role", response_model=UserOut)
def set_user_role(
    user_id: str,
    payload: RoleUpdate,
    admin: User = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    return user_service.set_role(db, user_id, payload.role)
