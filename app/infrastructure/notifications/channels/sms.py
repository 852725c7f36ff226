"""SMS channel implementation using the Twilio REST API."""

from typing import Optional, TYPE_CHECKING

import requests
import structlog

from infrastructure.notifications.channels.base import ChannelAdapter
from infrastructure.notifications.errors import ConfigurationError
from infrastructure.notifications.models import Channel, OutboundMessage
from infrastructure.operations import (
    OperationResult,
    classify_http_response,
    classify_request_exception,
)

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = structlog.get_logger()

SMS_MAX_LENGTH = 1600


def format_sms_body(body: str, subject: Optional[str] = None) -> str:
    """Prefix the subject and cap the body at the carrier concatenation limit."""
    full_message = f"{subject}: {body}" if subject else body
    if len(full_message) > SMS_MAX_LENGTH:
        full_message = full_message[: SMS_MAX_LENGTH - 3] + "..."
    return full_message


class SMSAdapter(ChannelAdapter):
    """SMS channel posting to Twilio's Messages resource.

    Requires phone numbers in E.164 format (+1234567890).
    """

    def __init__(self, settings: "Settings", session: Optional[requests.Session] = None):
        super().__init__()
        self._settings = settings.sms
        self._session = session
        self._messages_url: Optional[str] = None
        self.log = logger.bind(component="sms_adapter")

    @property
    def channel(self) -> Channel:
        return Channel.SMS

    def _configure(self) -> None:
        s = self._settings
        if not s.SMS_ENABLED:
            raise ConfigurationError("SMS channel disabled by SMS_ENABLED")
        missing = [
            name
            for name, value in (
                ("TWILIO_ACCOUNT_SID", s.TWILIO_ACCOUNT_SID),
                ("TWILIO_AUTH_TOKEN", s.TWILIO_AUTH_TOKEN),
                ("TWILIO_FROM_NUMBER", s.TWILIO_FROM_NUMBER),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing Twilio settings: {', '.join(missing)}")

        if self._session is None:
            self._session = requests.Session()
        self._session.auth = (s.TWILIO_ACCOUNT_SID, s.TWILIO_AUTH_TOKEN)
        self._messages_url = (
            f"{s.TWILIO_API_URL.rstrip('/')}/Accounts/{s.TWILIO_ACCOUNT_SID}/Messages.json"
        )

    def validate_recipient(self, message: OutboundMessage) -> OperationResult:
        phone = (message.recipient or "").strip()
        if not phone:
            return OperationResult.permanent_error(
                "Phone number required for SMS", error_code="MISSING_PHONE"
            )
        if not phone.startswith("+"):
            return OperationResult.permanent_error(
                "Phone number must be in E.164 format (+1234567890)",
                error_code="INVALID_PHONE_FORMAT",
            )
        digits = phone[1:]
        if not digits.isdigit() or len(digits) > 15:
            return OperationResult.permanent_error(
                "Phone number must have 1-15 digits after +",
                error_code="INVALID_PHONE_LENGTH",
            )
        return OperationResult.success(data={"phone_number": phone})

    def _deliver(self, message: OutboundMessage) -> OperationResult:
        payload = {
            "To": message.recipient.strip(),
            "From": self._settings.TWILIO_FROM_NUMBER,
            "Body": format_sms_body(message.body, message.subject),
        }
        try:
            response = self._session.post(
                self._messages_url,
                data=payload,
                timeout=self._settings.SMS_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            return classify_request_exception(e, provider="twilio")

        if response.status_code not in (200, 201):
            return classify_http_response(
                response.status_code,
                response.text,
                provider="twilio",
                headers=response.headers,
            )

        body = response.json()
        return OperationResult.success(
            data={"message_id": body.get("sid"), "status": body.get("status")},
            message="Twilio accepted SMS",
        )

    def _release(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
