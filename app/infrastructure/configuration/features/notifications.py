"""Notification feature settings."""

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings


class NotificationFeatureSettings(FeatureSettings):
    """Notification pipeline behaviour.

    Environment Variables:
        HR_NOTIFICATION_EMAIL: Mailbox that receives HR-facing notices
        BROADCAST_EMAIL: Distribution list used for company-wide notices
        NOTIFICATION_MAX_RETRIES: Explicit retries allowed per record (default: 3)
        QUIET_HOURS_ENABLED: Defer non-urgent deliveries during quiet hours
        IN_APP_INBOX_SIZE: Messages kept per user in the in-app inbox
    """

    hr_email: str = Field(default="hr@company.com", alias="HR_NOTIFICATION_EMAIL")
    broadcast_email: str = Field(
        default="all-users@company.com", alias="BROADCAST_EMAIL"
    )
    max_retries: int = Field(default=3, alias="NOTIFICATION_MAX_RETRIES")
    quiet_hours_enabled: bool = Field(default=True, alias="QUIET_HOURS_ENABLED")
    in_app_inbox_size: int = Field(default=200, alias="IN_APP_INBOX_SIZE")
