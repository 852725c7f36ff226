"""Firebase Cloud Messaging integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class PushSettings(IntegrationSettings):
    """FCM HTTP v1 configuration.

    Environment Variables:
        FCM_PROJECT_ID: Firebase project identifier
        FCM_SERVICE_ACCOUNT_FILE: Path to the service account JSON key
        FCM_API_URL: Base URL of the FCM v1 API
        PUSH_ENABLED: Master switch for the push channel
        PUSH_TIMEOUT_SECONDS: HTTP timeout for a single send
    """

    FCM_PROJECT_ID: str | None = Field(default=None, alias="FCM_PROJECT_ID")
    FCM_SERVICE_ACCOUNT_FILE: str | None = Field(
        default=None, alias="FCM_SERVICE_ACCOUNT_FILE"
    )
    FCM_API_URL: str = Field(
        default="https://fcm.googleapis.com/v1", alias="FCM_API_URL"
    )
    PUSH_ENABLED: bool = Field(default=True, alias="PUSH_ENABLED")
    PUSH_TIMEOUT_SECONDS: float = Field(default=10.0, alias="PUSH_TIMEOUT_SECONDS")
