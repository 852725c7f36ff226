"""SendGrid email integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class EmailSettings(IntegrationSettings):
    """SendGrid email delivery configuration.

    Environment Variables:
        SENDGRID_API_KEY: SendGrid API key (adapter stays unhealthy when unset)
        EMAIL_FROM_ADDRESS: Sender address used for every outbound email
        EMAIL_FROM_NAME: Optional display name for the sender
        EMAIL_ENABLED: Master switch for the email channel

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        api_key = settings.email.SENDGRID_API_KEY
        sender = settings.email.EMAIL_FROM_ADDRESS
        ```
    """

    SENDGRID_API_KEY: str | None = Field(default=None, alias="SENDGRID_API_KEY")
    EMAIL_FROM_ADDRESS: str = Field(
        default="noreply@company.com", alias="EMAIL_FROM_ADDRESS"
    )
    EMAIL_FROM_NAME: str = Field(default="HRMS", alias="EMAIL_FROM_NAME")
    EMAIL_ENABLED: bool = Field(default=True, alias="EMAIL_ENABLED")
