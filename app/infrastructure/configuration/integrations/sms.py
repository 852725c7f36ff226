"""Twilio SMS integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class SmsSettings(IntegrationSettings):
    """Twilio REST API configuration.

    Environment Variables:
        TWILIO_ACCOUNT_SID: Twilio account SID
        TWILIO_AUTH_TOKEN: Twilio auth token
        TWILIO_FROM_NUMBER: Sending phone number in E.164 format
        TWILIO_API_URL: Base URL of the Twilio REST API
        SMS_ENABLED: Master switch for the SMS channel
        SMS_TIMEOUT_SECONDS: HTTP timeout for a single send
    """

    TWILIO_ACCOUNT_SID: str | None = Field(default=None, alias="TWILIO_ACCOUNT_SID")
    TWILIO_AUTH_TOKEN: str | None = Field(default=None, alias="TWILIO_AUTH_TOKEN")
    TWILIO_FROM_NUMBER: str | None = Field(default=None, alias="TWILIO_FROM_NUMBER")
    TWILIO_API_URL: str = Field(
        default="https://api.twilio.com/2010-04-01", alias="TWILIO_API_URL"
    )
    SMS_ENABLED: bool = Field(default=True, alias="SMS_ENABLED")
    SMS_TIMEOUT_SECONDS: float = Field(default=10.0, alias="SMS_TIMEOUT_SECONDS")
