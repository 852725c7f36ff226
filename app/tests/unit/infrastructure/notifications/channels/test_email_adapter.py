"""Unit tests for EmailAdapter (SendGrid implementation)."""

from unittest.mock import MagicMock, patch

import pytest

from infrastructure.configuration.integrations import EmailSettings
from infrastructure.notifications.channels.email import (
    EmailAdapter,
    _sendgrid_error_details,
)
from infrastructure.operations import OperationStatus

pytestmark = pytest.mark.unit


@pytest.fixture
def sendgrid_client():
    with patch("infrastructure.notifications.channels.email.SendGridAPIClient") as cls:
        client = MagicMock()
        client.send.return_value = MagicMock(
            status_code=202, body="", headers={"X-Message-Id": "sg-msg-1"}
        )
        cls.return_value = client
        yield cls


@pytest.fixture
def email_adapter(settings, sendgrid_client):
    adapter = EmailAdapter(settings)
    adapter.initialize()
    return adapter


class TestEmailAdapter:
    def test_channel_name(self, settings):
        assert EmailAdapter(settings).channel_name == "email"

    def test_initialize_builds_client_with_key(self, email_adapter, sendgrid_client):
        assert email_adapter.is_healthy()
        sendgrid_client.assert_called_once_with("SG.test-key")

    def test_missing_api_key_leaves_adapter_unhealthy(self, settings, sendgrid_client):
        settings.email = EmailSettings(SENDGRID_API_KEY=None)
        adapter = EmailAdapter(settings)
        assert adapter.initialize() is False
        sendgrid_client.assert_not_called()

    def test_disabled_channel(self, settings, sendgrid_client):
        settings.email = EmailSettings(SENDGRID_API_KEY="SG.x", EMAIL_ENABLED=False)
        assert EmailAdapter(settings).initialize() is False

    def test_send_success(self, email_adapter, sendgrid_client, message_factory):
        result = email_adapter.send(message_factory(subject="Welcome", body="Hi Ann"))

        assert result.is_success
        assert result.provider_message_id == "sg-msg-1"
        mail = sendgrid_client.return_value.send.call_args.args[0]
        payload = mail.get()
        assert payload["from"]["email"] == "noreply@company.com"
        assert payload["from"]["name"] == "HRMS"
        assert payload["subject"] == "Welcome"
        assert payload["personalizations"][0]["to"][0]["email"] == "ann.smith@company.com"

    def test_invalid_address_is_rejected_before_sending(
        self, email_adapter, sendgrid_client, message_factory
    ):
        result = email_adapter.send(message_factory(recipient="not-an-email"))
        assert result.error_code == "INVALID_EMAIL"
        sendgrid_client.return_value.send.assert_not_called()

    def test_http_error_is_classified(self, email_adapter, sendgrid_client, message_factory):
        error = Exception("Bad Request")
        error.status_code = 400
        error.body = b'{"errors": [{"message": "Invalid from address"}]}'
        sendgrid_client.return_value.send.side_effect = error

        result = email_adapter.send(message_factory())

        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "SENDGRID_REJECTED"
        assert "Invalid from address" in result.message

    def test_server_error_is_transient(self, email_adapter, sendgrid_client, message_factory):
        error = Exception("Service Unavailable")
        error.status_code = 503
        sendgrid_client.return_value.send.side_effect = error

        result = email_adapter.send(message_factory())
        assert result.is_retryable
        assert result.error_code == "SENDGRID_SERVER_ERROR"

    def test_network_error_without_status_is_transient(
        self, email_adapter, sendgrid_client, message_factory
    ):
        sendgrid_client.return_value.send.side_effect = OSError("connection reset")
        result = email_adapter.send(message_factory())
        assert result.error_code == "SENDGRID_REQUEST_FAILED"
        assert result.is_retryable

    def test_unexpected_status_is_classified(
        self, email_adapter, sendgrid_client, message_factory
    ):
        sendgrid_client.return_value.send.return_value = MagicMock(
            status_code=401, body="", headers={}
        )
        result = email_adapter.send(message_factory())
        assert result.status == OperationStatus.UNAUTHORIZED


class TestSendgridErrorDetails:
    def test_json_errors(self):
        body = '{"errors": [{"message": "a"}, {"message": "b"}]}'
        assert _sendgrid_error_details(body) == "a; b"

    def test_plain_text(self):
        assert _sendgrid_error_details("oops") == "oops"

    def test_empty(self):
        assert _sendgrid_error_details(None) is None
        assert _sendgrid_error_details("") is None
