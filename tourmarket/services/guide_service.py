"""Guide profile workflow: direct vs. admin-gated profile updates.

A guide profile patch is split at the boundary into two disjoint channels:

- approval-gated: ``bio`` and ``new_images``. Never written to the guide;
  they become one PENDING GuideProfileChangeRequest.
- direct: contact details, ``is_active``, program selection, reordering or
  removing ``existing_images`` and the user's name fields. Applied at once.

A change request resolves exactly once (PENDING → APPROVED | REJECTED).
Approval replaces the bio and appends the images, in the same transaction
that resolves the request.
"""
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from tourmarket.database import transaction
from tourmarket.errors import BadRequestError, NotFoundError
from tourmarket.models.guide import Guide, GuideProfileChangeRequest, ChangeType, ChangeRequestStatus
from tourmarket.models.program import Program
from tourmarket.models.user import User, Role
from tourmarket.services import notification_service
from tourmarket.utils import utcnow

logger = logging.getLogger(__name__)

GATED_FIELDS = ("bio", "new_images")
DIRECT_GUIDE_FIELDS = ("phone_number", "email", "is_active")
DIRECT_USER_FIELDS = ("first_name", "last_name", "username")

PENDING_MESSAGE = "Your bio and image changes require admin approval and are pending review."


def split_patch(patch: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """Partition a profile patch into (gated, direct) field sets."""
    gated: dict[str, Any] = {}
    if patch.get("bio") is not None:
        gated["bio"] = patch["bio"]
    if patch.get("new_images"):
        gated["images"] = list(patch["new_images"])
    direct = {k: v for k, v in patch.items() if k not in GATED_FIELDS}
    return gated, direct


def classify_change(changes: dict[str, Any]) -> ChangeType:
    has_bio = "bio" in changes
    has_images = "images" in changes
    if has_bio and has_images and len(changes) == 2:
        return ChangeType.BIO_AND_IMAGES_UPDATE
    if len(changes) == 1 and has_bio:
        return ChangeType.BIO_UPDATE
    if len(changes) == 1 and has_images:
        return ChangeType.IMAGES_UPDATE
    return ChangeType.MULTIPLE_CHANGES


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------
def get_guide(db: Session, guide_id: str) -> Guide:
    guide = db.query(Guide).filter(Guide.guide_id == guide_id).first()
    if not guide:
        raise NotFoundError("Guide not found")
    return guide


def get_guide_programs(db: Session, guide_id: str) -> list[Program]:
    guide = get_guide(db, guide_id)
    return [p for p in guide.selected_programs if p.is_active and p.is_approved]


def list_pending_change_requests(db: Session) -> list[GuideProfileChangeRequest]:
    return (
        db.query(GuideProfileChangeRequest)
        .filter(GuideProfileChangeRequest.status == ChangeRequestStatus.PENDING)
        .order_by(GuideProfileChangeRequest.created_at.desc())
        .all()
    )


def list_pending_guide_approvals(db: Session) -> list[Guide]:
    return db.query(Guide).filter(Guide.is_approved.is_(False)).order_by(Guide.created_at).all()


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------
def register_as_guide(db: Session, user_id: str, data: dict[str, Any]) -> Guide:
    """Create an unapproved guide profile. The user's role stays TOURIST until approval."""
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    if user.guide:
        raise BadRequestError("User is already registered as a guide")

    guide = Guide(
        user_id=user_id,
        bio=data.get("bio") or None,
        phone_number=data.get("phone_number") or None,
        email=data.get("email") or None,
        images=[],
        is_active=True,
        is_approved=False,
    )
    db.add(guide)
    db.commit()
    db.refresh(guide)
    logger.info("User %s registered as guide %s (pending approval)", user_id, guide.guide_id)
    return guide


# ---------------------------------------------------------------------------
# Dual-channel update
# ---------------------------------------------------------------------------
def _apply_direct(db: Session, guide: Guide, direct: dict[str, Any]) -> None:
    for field in DIRECT_GUIDE_FIELDS:
        if field in direct:
            if field == "is_active" and direct[field] is None:
                raise BadRequestError("is_active cannot be empty")
            setattr(guide, field, direct[field])

    if direct.get("existing_images") is not None:
        current = list(guide.images or [])
        unknown = [img for img in direct["existing_images"] if img not in current]
        if unknown:
            raise BadRequestError("Existing images may only be reordered or removed; new images need approval")
        guide.images = list(direct["existing_images"])

    if direct.get("program_ids") is not None:
        program_ids = list(dict.fromkeys(direct["program_ids"]))
        programs = db.query(Program).filter(Program.program_id.in_(program_ids)).all() if program_ids else []
        if len(programs) != len(program_ids):
            raise BadRequestError("One or more program IDs are invalid")
        guide.selected_programs = programs

    user_fields = {k: direct[k] for k in DIRECT_USER_FIELDS if k in direct}
    if user_fields:
        if "first_name" in user_fields and not user_fields["first_name"]:
            raise BadRequestError("First name cannot be empty")
        for field, value in user_fields.items():
            setattr(guide.user, field, value)


def update_guide(db: Session, guide_id: str, actor_id: str, patch: dict[str, Any]) -> dict[str, Any]:
    """Apply direct fields now and file gated fields as a change request."""
    guide = db.query(Guide).filter(Guide.guide_id == guide_id, Guide.user_id == actor_id).first()
    if not guide:
        raise NotFoundError("Guide not found")

    gated, direct = split_patch(patch)
    was_active = guide.is_active
    change_request: Optional[GuideProfileChangeRequest] = None

    with transaction(db):
        _apply_direct(db, guide, direct)
        if gated:
            change_request = GuideProfileChangeRequest(
                guide_id=guide_id,
                change_type=classify_change(gated),
                proposed_bio=gated.get("bio"),
                proposed_images=gated.get("images", []),
                status=ChangeRequestStatus.PENDING,
            )
            db.add(change_request)

    db.refresh(guide)
    logger.info(
        "Updated guide %s (direct fields: %s, change request: %s)",
        guide_id, sorted(direct), change_request.request_id if change_request else None,
    )

    if change_request:
        notification_service.notify_user(
            db, actor_id,
            "Your profile changes to bio and new images have been submitted for approval. "
            "An admin will review them shortly.",
        )
    if guide.is_active and not was_active:
        notification_service.notify_user(
            db, actor_id,
            "Your guide status has been updated to active. You will now appear in search results.",
        )
    elif was_active and not guide.is_active:
        notification_service.notify_user(
            db, actor_id,
            "Your guide status has been updated to inactive. You will not appear in search results.",
        )

    result: dict[str, Any] = {"guide": guide, "pending_changes": change_request is not None}
    if change_request:
        result["pending_change_message"] = PENDING_MESSAGE
        result["change_request_id"] = change_request.request_id
    return result


# ---------------------------------------------------------------------------
# Admin review
# ---------------------------------------------------------------------------
def process_change_request(
    db: Session, request_id: str, approve: bool, admin_comment: Optional[str] = None
) -> GuideProfileChangeRequest:
    """Resolve a PENDING change request. Already-resolved requests are rejected."""
    with transaction(db):
        request = (
            db.query(GuideProfileChangeRequest)
            .filter(GuideProfileChangeRequest.request_id == request_id)
            .with_for_update()
            .first()
        )
        if not request:
            raise NotFoundError("Change request not found")
        if request.status != ChangeRequestStatus.PENDING:
            raise BadRequestError(f"Change request is already {request.status.value}")

        if approve:
            guide = request.guide
            if request.proposed_bio is not None:
                guide.bio = request.proposed_bio
            if request.proposed_images:
                guide.images = list(guide.images or []) + list(request.proposed_images)
            request.status = ChangeRequestStatus.APPROVED
        else:
            request.status = ChangeRequestStatus.REJECTED
        request.admin_comment = admin_comment
        request.resolved_at = utcnow()

    db.refresh(request)
    logger.info("Change request %s %s", request_id, request.status.value)

    suffix = f" Comment: {admin_comment}" if admin_comment else ""
    if approve:
        message = f"✅ Your bio and image changes have been approved.{suffix}"
    else:
        message = f"❌ Your profile change request has been rejected.{suffix}"
    notification_service.notify_user(db, request.guide.user_id, message)
    return request


def _sync_user_role(db: Session, guide: Guide, approved: bool) -> None:
    user = guide.user
    if user.is_admin:
        # admins keep their role; approval only flips the guide flag
        return
    user.role = Role.GUIDE if approved else Role.TOURIST
    db.flush()


def update_guide_approval_status(db: Session, guide_id: str, approved: bool) -> Guide:
    """Set Guide.is_approved and the owner's role together, or not at all."""
    with transaction(db):
        guide = get_guide(db, guide_id)
        guide.is_approved = approved
        db.flush()
        _sync_user_role(db, guide, approved)

    db.refresh(guide)
    logger.info("Guide %s approval set to %s", guide_id, approved)
    notification_service.notify_guide_approval(db, guide.user_id, approved)
    return guide
