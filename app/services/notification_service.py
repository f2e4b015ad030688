import asyncio
import html
from uuid import UUID

from app.core.celery_app import celery
from app.core.database import SessionLocal
from app.core.logging_config import setup_logger
from app.models.profile_db import profile_crud
from app.services.email import send_email

logger = setup_logger("matrimony.notifications")

LIKE_SUBJECT = "You have received an interest!"

LIKE_BODY = """
<html>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
        <h2 style="color: #2c5aa0;">You have received an interest!</h2>
        <p>Hello,</p>
        <p>Great news! Someone is interested in your profile.</p>
        <div style="background-color: #f8f9fa; padding: 20px; border-radius: 8px; margin: 20px 0;">
            <p style="margin: 0;"><strong>Profile ID:</strong> {profile_id}</p>
            <p style="margin: 10px 0 0 0;"><strong>Name:</strong> {name}</p>
        </div>
        <p>Log in to your account to view their complete profile and connect with them!</p>
        <p style="font-size: 12px; color: #666;">
            You can turn these notifications off in your account settings.
        </p>
    </div>
</body>
</html>
"""


class NotificationError(Exception):
    pass


class NotificationService:
    def __init__(self, session_factory=SessionLocal, sender=send_email):
        self.session_factory = session_factory
        self.sender = sender

    async def send_like_notification_email(self, recipient_user_id: UUID, sender_profile_id: int, sender_name: str):
        """Email the liked user that someone expressed interest in them."""
        db = self.session_factory()
        try:
            recipient = profile_crud.get_profile_by_user_id(db, recipient_user_id)
        finally:
            db.close()

        if recipient is None:
            raise NotificationError(f"recipient profile not found for user {recipient_user_id}")
        if not recipient.email:
            raise NotificationError(f"recipient {recipient_user_id} has no email address")

        # display names are user input
        body = LIKE_BODY.format(profile_id=sender_profile_id, name=html.escape(sender_name or ""))
        await self.sender(recipient.email, LIKE_SUBJECT, body, is_html=True)
        logger.info(f"Like notification sent to user {recipient_user_id} for profile {sender_profile_id}")


@celery.task(name="notifications.send_like_notification_email")
def send_like_notification_email(recipient_user_id: str, sender_profile_id: int, sender_name: str):
    """Deliver one like notification. Failures are logged and never retried."""
    try:
        asyncio.run(NotificationService().send_like_notification_email(
            UUID(recipient_user_id), sender_profile_id, sender_name
        ))
    except NotificationError as e:
        logger.warning(f"Like notification skipped: {e}")
        return False
    except Exception:
        logger.exception(f"Failed to send like notification to user {recipient_user_id}")
        return False
    return True
