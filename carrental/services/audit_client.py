"""
Client for the audit-log service.

Booking and payment events are posted as ``{action, userEmail, details}`` to
``AUDIT_SERVICE_URL``. Delivery happens on a background thread and a failed
delivery is logged, never raised into the request that triggered it.
"""

import logging
import threading
from typing import Optional

import httpx

from carrental.config import settings
from carrental.services.background_tasks import BackgroundTaskService

logger = logging.getLogger(__name__)


# Action names shared with the audit service's consumers
BOOKING_CREATED = "BOOKING_CREATED"
BOOKING_CANCELLED = "BOOKING_CANCELLED"
BOOKING_CONFIRMED = "BOOKING_CONFIRMED"
BOOKING_COMPLETED = "BOOKING_COMPLETED"
PAYMENT_SUCCESS = "PAYMENT_SUCCESS"
PAYMENT_STATUS_UPDATED = "PAYMENT_STATUS_UPDATED"


class AuditClient:
    def __init__(
        self,
        service_url: Optional[str] = None,
        enabled: Optional[bool] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.service_url = service_url or settings.audit_service_url
        self.enabled = settings.audit_enabled if enabled is None else enabled
        self.timeout = timeout or settings.audit_timeout_seconds
        self.transport = transport

    def build_payload(self, action: str, user_email: str, details: str) -> dict:
        return {
            "action": action,
            "userEmail": user_email or "system",
            "details": details or "",
        }

    def send(self, action: str, user_email: str, details: str) -> bool:
        """POST one audit event synchronously. Returns True on a 2xx response."""
        payload = self.build_payload(action, user_email, details)
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.service_url, json=payload)
                response.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.error(f"Failed to deliver audit event {action} for {user_email}: {e}")
            return False

    def log_activity(self, action: str, user_email: str, details: str) -> Optional[threading.Thread]:
        """Queue an audit event for background delivery."""
        if not self.enabled:
            logger.debug(f"Audit disabled; dropping {action}")
            return None

        logger.info(f"Sending audit log: {action} - {user_email}")
        return BackgroundTaskService.run_async(
            self.send,
            action,
            user_email,
            details,
            task_name=f"audit-{action.lower()}",
        )


audit_client = AuditClient()
