import pytest

from infrastructure.logging.formatters import (
    add_service_info,
    mask_recipient,
    mask_recipients,
    mask_sensitive_data,
    truncate_large_values,
)

pytestmark = pytest.mark.unit


class TestMaskSensitiveData:
    def test_masks_credentials(self):
        processor = mask_sensitive_data()
        result = processor(
            None,
            "info",
            {"event": "x", "SENDGRID_API_KEY": "SG.abc", "auth_token": "t", "user": "u"},
        )
        assert result["SENDGRID_API_KEY"] == "***REDACTED***"
        assert result["auth_token"] == "***REDACTED***"
        assert result["user"] == "u"

    def test_none_values_left_alone(self):
        result = mask_sensitive_data()(None, "info", {"password": None})
        assert result["password"] is None

    def test_additional_patterns(self):
        processor = mask_sensitive_data(
            mask_value="[hidden]", additional_patterns=frozenset({"sid"})
        )
        assert processor(None, "info", {"account_sid": "AC1"})["account_sid"] == "[hidden]"


class TestMaskRecipients:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("ann.smith@company.com", "an***@company.com"),
            ("a@company.com", "a***@company.com"),
            ("+15551234567", "***4567"),
            ("abc", "***"),
        ],
    )
    def test_mask_recipient(self, value, expected):
        assert mask_recipient(value) == expected

    def test_processor_masks_known_keys_only(self):
        result = mask_recipients()(
            None,
            "info",
            {"email": "ann.smith@company.com", "phone_number": "+15551234567", "user_id": "emp-1"},
        )
        assert result["email"] == "an***@company.com"
        assert result["phone_number"] == "***4567"
        assert result["user_id"] == "emp-1"


class TestOtherProcessors:
    def test_truncate_large_values(self):
        result = truncate_large_values(10)(None, "info", {"body": "x" * 50, "n": 5})
        assert result["body"].startswith("x" * 10 + "...[truncated, 50 chars")
        assert result["n"] == 5

    def test_add_service_info(self):
        result = add_service_info("notification-service", "abc123")(None, "info", {})
        assert result == {"service": "notification-service", "version": "abc123"}
