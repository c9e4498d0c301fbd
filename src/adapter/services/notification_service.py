"""Operator alert channels

Alerts go to the log always, and to an HTTP webhook when one is configured.
"""

import logging
from typing import Optional
import httpx
from src.app.services.notification_service import NotificationService, OperatorAlert

logger = logging.getLogger(__name__)


class LoggingNotificationService(NotificationService):
    """Writes alerts to the log. Never fails."""

    async def send_alert(self, alert: OperatorAlert) -> bool:
        logger.warning(
            f"[OPERATOR ALERT] kind={alert.kind.value} reference={alert.reference} "
            f"message={alert.message} details={alert.details}"
        )
        return True


class WebhookNotificationService(NotificationService):
    """
    Notification service that sends alerts via HTTP webhook

    POSTs a JSON payload to the configured URL.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def send_alert(self, alert: OperatorAlert) -> bool:
        """
        Returns:
            True if webhook call succeeded, False otherwise
        """
        payload = {
            "type": "operator_alert",
            "kind": alert.kind.value,
            "message": alert.message,
            "reference": alert.reference,
            "details": alert.details,
            "raised_at": alert.raised_at.isoformat(),
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.webhook_url, json=payload)
                response.raise_for_status()
                logger.info(f"Alert {alert.kind.value} for {alert.reference} sent to {self.webhook_url}")
                return True
        except httpx.HTTPError as e:
            logger.error(f"Failed to send alert {alert.kind.value} for {alert.reference}: {e}")
            return False


class CompositeNotificationService(NotificationService):
    """Delegates to several channels; succeeds if any channel does."""

    def __init__(self, services: list[NotificationService]):
        self.services = services

    async def send_alert(self, alert: OperatorAlert) -> bool:
        success = False
        for service in self.services:
            try:
                if await service.send_alert(alert):
                    success = True
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
        return success


def create_notification_service(webhook_url: Optional[str] = None, timeout: float = 10.0) -> NotificationService:
    """
    Factory function to create appropriate notification service

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     service with logging + webhook. Otherwise, just logging.
    """
    services: list[NotificationService] = [LoggingNotificationService()]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url, timeout=timeout))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
