# =============================================================================
# hacknotify/notifications/email.py
# Email delivery through the Resend HTTP API
# =============================================================================

from __future__ import annotations
from typing import Any, Dict, Optional
import logging

import requests
from supabase import Client

from hacknotify.config import get_settings
from hacknotify.config.settings import DEFAULT_FROM_EMAIL
from hacknotify.errors import NotificationError

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"
NOTIFICATION_LOG_TABLE = "notification_logs"


class EmailSender:
    """
    Sends plain-text emails and records each delivered one in
    notification_logs, which the jobs use for deduplication.

    Usage:
        sender = EmailSender.from_settings(get_admin_client())
        sender.send("ada@example.com", subject, body,
                    user_id=user_id, notification_type="daily_summary")
    """

    def __init__(
        self,
        api_key: str,
        from_email: str = DEFAULT_FROM_EMAIL,
        client: Optional[Client] = None,
        session: Optional[requests.Session] = None,
        timeout: int = 10,
    ):
        self.from_email = from_email
        self.client = client
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        })

    @classmethod
    def from_settings(cls, client: Optional[Client] = None) -> EmailSender:
        settings = get_settings()
        return cls(
            api_key=settings.require("resend_api_key"),
            from_email=settings.from_email,
            client=client,
            timeout=settings.request_timeout,
        )

    def send(
        self,
        to: str,
        subject: str,
        text: str,
        user_id: Optional[str] = None,
        notification_type: Optional[str] = None,
    ) -> Optional[str]:
        """
        Deliver one email.

        Returns:
            The provider's message id, when it reports one

        Raises:
            NotificationError: if the provider rejects or cannot be reached
        """
        payload = {
            "from": self.from_email,
            "to": [to],
            "subject": subject,
            "text": text,
        }
        try:
            response = self.session.post(RESEND_API_URL, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise NotificationError(
                f"Email delivery failed: {e}",
                recipient=to,
                notification_type=notification_type,
            ) from e

        try:
            message_id = response.json().get("id")
        except ValueError:
            message_id = None

        logger.info(f"Sent {notification_type or 'email'} to {to}")
        self._log_delivery(user_id, notification_type, to)
        return message_id

    def _log_delivery(self, user_id: Optional[str], notification_type: Optional[str], to: str) -> None:
        if self.client is None or not user_id or not notification_type:
            return
        row: Dict[str, Any] = {"user_id": user_id, "type": notification_type}
        try:
            self.client.table(NOTIFICATION_LOG_TABLE).insert(row).execute()
        except Exception as e:
            # The email is out; a missing log row only risks one duplicate
            logger.warning(f"Could not log {notification_type} for {to}: {e}")
