"""Notification service configuration settings - main aggregator."""

from pydantic_settings import BaseSettings, SettingsConfigDict

# Integration settings
from infrastructure.configuration.integrations import (
    EmailSettings,
    PushSettings,
    SmsSettings,
)

# Feature settings
from infrastructure.configuration.features import NotificationFeatureSettings

# Infrastructure settings
from infrastructure.configuration.infrastructure import (
    DispatchSettings,
    EventSettings,
)


class Settings(BaseSettings):
    """Notification service configuration settings - main aggregator.

    Aggregates all domain-specific settings into a single configuration object.
    Settings are organized by concern:

    - **Integrations**: Channel providers (SendGrid, Twilio, FCM)
    - **Features**: Notification pipeline behaviour
    - **Infrastructure**: Dispatch queue, worker pool and event consumer

    Environment Variables:
        PREFIX: Environment prefix for multi-tenant deployments
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        GIT_SHA: Git commit SHA for deployment tracking

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        concurrency = settings.dispatch.concurrency
        if settings.email.SENDGRID_API_KEY:
            # Configure email adapter...
        ```
    """

    # Application-level settings
    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    # Integration settings
    email: EmailSettings
    sms: SmsSettings
    push: PushSettings

    # Feature settings
    notifications: NotificationFeatureSettings

    # Infrastructure settings
    dispatch: DispatchSettings
    events: EventSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production.

        Returns:
            True if PREFIX is empty (production), False otherwise.
        """
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            # Integrations
            "email": EmailSettings,
            "sms": SmsSettings,
            "push": PushSettings,
            # Features
            "notifications": NotificationFeatureSettings,
            # Infrastructure
            "dispatch": DispatchSettings,
            "events": EventSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )
