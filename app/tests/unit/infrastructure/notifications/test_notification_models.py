"""Unit tests for notification models."""

import pytest
from pydantic import ValidationError

from infrastructure.notifications.models import (
    Channel,
    NotificationRecord,
    NotificationRequest,
    NotificationStatus,
    NotificationType,
    QuietHours,
    UserPreference,
)

pytestmark = pytest.mark.unit


class TestNotificationRequest:
    def test_accepts_camel_case_wire_format(self):
        request = NotificationRequest.model_validate(
            {
                "type": "EMPLOYEE_WELCOME",
                "channel": "EMAIL",
                "userId": "emp-1",
                "correlationId": "corr-1",
                "message": "Hello",
            }
        )
        assert request.user_id == "emp-1"
        assert request.correlation_id == "corr-1"
        assert request.type == NotificationType.EMPLOYEE_WELCOME

    def test_requires_user_or_address(self, request_factory):
        with pytest.raises(ValidationError, match="recipient"):
            request_factory(user_id=None, email=None)

    def test_address_without_user_is_valid(self, request_factory):
        request = request_factory(user_id=None)
        assert request.email == "ann.smith@company.com"

    def test_empty_message_rejected(self, request_factory):
        with pytest.raises(ValidationError, match="empty"):
            request_factory(message="   ")

    def test_template_allows_empty_message(self, request_factory):
        request = request_factory(message="", template_id="welcome")
        assert request.template_id == "welcome"

    def test_invalid_email_rejected(self, request_factory):
        with pytest.raises(ValidationError):
            request_factory(email="not-an-email")

    @pytest.mark.parametrize("phone", ["5551234567", "+1555abc", "+123"])
    def test_invalid_phone_rejected(self, request_factory, phone):
        with pytest.raises(ValidationError):
            request_factory(channel=Channel.SMS, phone_number=phone)

    def test_unknown_type_rejected(self, request_factory):
        with pytest.raises(ValidationError):
            request_factory(type="PAYROLL_RUN")


class TestNotificationRecord:
    def test_defaults(self, record_factory):
        record = record_factory()
        assert record.id
        assert record.status == NotificationStatus.PENDING
        assert record.retry_count == 0
        assert record.max_retries == 3
        assert not record.is_read

    def test_retry_count_cannot_exceed_max(self, record_factory):
        with pytest.raises(ValidationError):
            record_factory(retry_count=4, max_retries=3)

    def test_apply_revalidates(self, record_factory):
        record = record_factory(max_retries=1)
        with pytest.raises(ValidationError):
            record.apply({"retry_count": 2})

    def test_apply_returns_copy(self, record_factory):
        record = record_factory()
        updated = record.apply({"status": NotificationStatus.FAILED})
        assert updated.status == NotificationStatus.FAILED
        assert record.status == NotificationStatus.PENDING
        assert updated.id == record.id

    def test_can_retry(self, record_factory):
        assert not record_factory().can_retry
        assert record_factory(status=NotificationStatus.FAILED).can_retry
        assert not record_factory(
            status=NotificationStatus.FAILED, retry_count=3
        ).can_retry

    def test_ids_are_unique(self, record_factory):
        assert record_factory().id != record_factory().id


class TestPreferences:
    def test_everything_enabled_by_default(self):
        preference = UserPreference(user_id="emp-1")
        assert preference.email_enabled and preference.sms_enabled
        assert preference.attendance_alerts
        assert preference.quiet_hours is None

    @pytest.mark.parametrize("value", ["24:00", "7:5:1", "ab:cd", "12:60"])
    def test_quiet_hours_time_validation(self, value):
        with pytest.raises(ValidationError):
            QuietHours(start=value, end="06:00")

    def test_record_model_is_reused_for_all_channels(self, record_factory):
        for channel in Channel:
            assert isinstance(record_factory(channel=channel), NotificationRecord)
