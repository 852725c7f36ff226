"""Email channel implementation using SendGrid."""

import json
from typing import Any, Optional, TYPE_CHECKING

import structlog
from pydantic import TypeAdapter, EmailStr, ValidationError
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from infrastructure.notifications.channels.base import ChannelAdapter
from infrastructure.notifications.errors import ConfigurationError
from infrastructure.notifications.models import Channel, OutboundMessage
from infrastructure.operations import OperationResult, classify_http_response

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = structlog.get_logger()

_email_adapter = TypeAdapter(EmailStr)


def _sendgrid_error_details(body: Any) -> Optional[str]:
    """Return a readable description of a SendGrid error payload."""
    if body in (None, ""):
        return None
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            return body.strip() or None
    if isinstance(body, dict) and isinstance(body.get("errors"), list):
        messages = [
            str(item["message"])
            for item in body["errors"]
            if isinstance(item, dict) and item.get("message")
        ]
        if messages:
            return "; ".join(messages)
    return json.dumps(body, default=str)


class EmailAdapter(ChannelAdapter):
    """Email channel backed by the SendGrid v3 API.

    SendGrid answers 202 when it accepts a message; the provider message id
    comes back in the ``X-Message-Id`` header.
    """

    def __init__(self, settings: "Settings"):
        super().__init__()
        self._settings = settings.email
        self._client: Optional[SendGridAPIClient] = None
        self.log = logger.bind(component="email_adapter")

    @property
    def channel(self) -> Channel:
        return Channel.EMAIL

    def _configure(self) -> None:
        if not self._settings.EMAIL_ENABLED:
            raise ConfigurationError("Email channel disabled by EMAIL_ENABLED")
        if not self._settings.SENDGRID_API_KEY:
            raise ConfigurationError("SENDGRID_API_KEY is not set")
        self._client = SendGridAPIClient(self._settings.SENDGRID_API_KEY)

    def validate_recipient(self, message: OutboundMessage) -> OperationResult:
        try:
            _email_adapter.validate_python(message.recipient)
        except ValidationError:
            return OperationResult.permanent_error(
                f"Invalid email address: {message.recipient}",
                error_code="INVALID_EMAIL",
            )
        return OperationResult.success(data={"email": message.recipient})

    def _deliver(self, message: OutboundMessage) -> OperationResult:
        mail = Mail(
            from_email=(self._settings.EMAIL_FROM_ADDRESS, self._settings.EMAIL_FROM_NAME),
            to_emails=message.recipient,
            subject=message.subject or "Notification",
            plain_text_content=message.body,
            html_content=message.data.get("html_body") or message.body,
        )

        try:
            response = self._client.send(mail)
        except Exception as e:  # noqa: BLE001 - python_http_client raises HTTPError subclasses
            status_code = getattr(e, "status_code", None)
            details = _sendgrid_error_details(getattr(e, "body", None)) or str(e)
            if isinstance(status_code, int):
                return classify_http_response(status_code, details, provider="sendgrid")
            return OperationResult.transient_error(
                f"sendgrid request failed: {details}",
                error_code="SENDGRID_REQUEST_FAILED",
            )

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            details = _sendgrid_error_details(getattr(response, "body", None)) or ""
            return classify_http_response(status_code or 0, details, provider="sendgrid")

        headers = getattr(response, "headers", None) or {}
        return OperationResult.success(
            data={"message_id": headers.get("X-Message-Id")},
            message=f"SendGrid accepted email ({status_code})",
        )

    def _release(self) -> None:
        self._client = None
