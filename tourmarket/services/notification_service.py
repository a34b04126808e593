"""Notification collaborator: best-effort Telegram Bot API messages.

Delivery never fails the calling operation: every problem is logged and
reported as ``False``.
"""
import logging
from typing import Any

import httpx
from sqlalchemy.orm import Session

from tourmarket.config import settings
from tourmarket.models.user import User

logger = logging.getLogger(__name__)


def send_telegram_message(chat_id: str, text: str) -> dict[str, Any]:
    """POST to ``sendMessage`` and return Telegram's JSON payload."""
    url = f"{settings.TELEGRAM_API_URL}/bot{settings.TELEGRAM_BOT_TOKEN}/sendMessage"
    with httpx.Client(timeout=settings.NOTIFY_TIMEOUT_SEC) as client:
        resp = client.post(url, json={"chat_id": chat_id, "text": text})
        # Telegram reports failures as ok=false, often with a 4xx status
        try:
            return resp.json()
        except ValueError:
            return {"ok": False, "status_code": resp.status_code, "description": resp.text[:500]}


def notify_user(db: Session, user_id: str, message: str) -> bool:
    """Send ``message`` to the user's Telegram chat (private chat id == telegram id)."""
    if not settings.TELEGRAM_BOT_TOKEN:
        logger.warning("TELEGRAM_BOT_TOKEN not configured; dropping notification for user %s", user_id)
        return False

    user = db.query(User).filter(User.user_id == user_id).first()
    if not user or not user.telegram_id:
        logger.warning("Cannot notify user %s: user not found or has no Telegram id", user_id)
        return False

    try:
        payload = send_telegram_message(user.telegram_id, message)
    except httpx.HTTPError as exc:
        logger.warning("Notification to user %s failed: %s", user_id, exc)
        return False

    if not payload.get("ok"):
        logger.warning("Telegram rejected notification to user %s: %s", user_id, payload.get("description"))
        return False
    return True


def notify_guide_approval(db: Session, user_id: str, approved: bool) -> bool:
    message = (
        "🎉 Congratulations! Your guide profile has been approved. You can now access all guide features."
        if approved
        else "❌ Your guide profile has been rejected. Please contact support for more information."
    )
    return notify_user(db, user_id, message)
