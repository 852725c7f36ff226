"""Base classes shared by every settings section.

Each section reads its own environment variables (and ``.env``) through
field aliases, so sections can be instantiated independently in tests.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    case_sensitive=True,
    extra="ignore",
)


class IntegrationSettings(BaseSettings):
    """Credentials and endpoints for a channel provider (SendGrid, Twilio, FCM).

    A provider whose required fields are empty is not an error here; the
    matching channel adapter reports itself unhealthy at startup.
    """

    model_config = SECTION_CONFIG


class FeatureSettings(BaseSettings):
    """Notification pipeline behaviour: recipients, retries, quiet hours."""

    model_config = SECTION_CONFIG


class InfrastructureSettings(BaseSettings):
    """Dispatch queue, worker pool and event consumer tuning."""

    model_config = SECTION_CONFIG
