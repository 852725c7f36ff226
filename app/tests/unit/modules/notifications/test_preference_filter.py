"""Unit tests for the preference and quiet-hours filter."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from infrastructure.notifications.errors import PreferenceLookupError
from infrastructure.notifications.models import Channel, NotificationType
from modules.notifications.preferences import (
    PreferenceFilter,
    category_toggle,
    in_quiet_window,
    parse_time_of_day,
)
from tests.factories import make_preference

pytestmark = pytest.mark.unit


def at(hour, minute=0):
    return datetime(2026, 3, 2, hour, minute, tzinfo=timezone.utc)


class TestIsAllowed:
    def test_no_user_is_always_allowed(self, preference_filter):
        assert preference_filter.is_allowed(
            None, NotificationType.SYSTEM_MAINTENANCE, Channel.EMAIL
        )

    def test_defaults_created_on_first_lookup(self, preference_filter, preference_store):
        assert preference_filter.is_allowed(
            "emp-1", NotificationType.EMPLOYEE_WELCOME, Channel.EMAIL
        )
        assert preference_store.get("emp-1") is not None

    def test_channel_disabled(self, preference_filter, preference_store):
        preference_store.save(make_preference(email_enabled=False))
        assert not preference_filter.is_allowed(
            "emp-1", NotificationType.EMPLOYEE_WELCOME, Channel.EMAIL
        )
        assert preference_filter.is_allowed(
            "emp-1", NotificationType.EMPLOYEE_WELCOME, Channel.SMS
        )

    def test_in_app_has_no_channel_switch(self, preference_filter, preference_store):
        preference_store.save(
            make_preference(email_enabled=False, sms_enabled=False, push_enabled=False)
        )
        assert preference_filter.is_allowed(
            "emp-1", NotificationType.ATTENDANCE_LATE_CHECKIN, Channel.IN_APP
        )

    @pytest.mark.parametrize(
        "toggle,notification_type",
        [
            ("employee_updates", NotificationType.EMPLOYEE_UPDATED),
            ("system_alerts", NotificationType.SYSTEM_MAINTENANCE),
            ("recruitment_updates", NotificationType.RECRUITMENT_STATUS_UPDATED),
            ("performance_updates", NotificationType.PERFORMANCE_REVIEW_DUE),
            ("learning_updates", NotificationType.LEARNING_COURSE_ASSIGNED),
            ("attendance_alerts", NotificationType.ATTENDANCE_LEAVE_APPROVED),
        ],
    )
    def test_category_disabled(
        self, preference_filter, preference_store, toggle, notification_type
    ):
        preference_store.save(make_preference(**{toggle: False}))
        assert not preference_filter.is_allowed("emp-1", notification_type, Channel.EMAIL)

    def test_custom_type_has_no_category(self, preference_filter, preference_store):
        preference_store.save(
            make_preference(employee_updates=False, system_alerts=False)
        )
        assert preference_filter.is_allowed("emp-1", NotificationType.CUSTOM, Channel.EMAIL)

    def test_lookup_failure_defaults_to_allow(self):
        store = MagicMock()
        store.get.side_effect = PreferenceLookupError("preference db unavailable")
        preference_filter = PreferenceFilter(store)
        assert preference_filter.is_allowed(
            "emp-1", NotificationType.EMPLOYEE_WELCOME, Channel.EMAIL
        )
        assert preference_filter.quiet_hours_remaining("emp-1") is None


class TestQuietHours:
    @pytest.mark.parametrize(
        "hour,minute,quiet",
        [(23, 30, True), (5, 30, True), (12, 0, False), (22, 0, True), (6, 0, False)],
    )
    def test_window_wrapping_midnight(
        self, preference_filter, preference_store, hour, minute, quiet
    ):
        preference_store.save(make_preference(quiet_hours=("22:00", "06:00")))
        assert preference_filter.is_quiet_hours("emp-1", at(hour, minute)) is quiet

    def test_remaining_time(self, preference_filter, preference_store):
        preference_store.save(make_preference(quiet_hours=("22:00", "06:00")))
        assert preference_filter.quiet_hours_remaining("emp-1", at(23, 30)) == timedelta(
            hours=6, minutes=30
        )
        assert preference_filter.quiet_hours_remaining("emp-1", at(5, 30)) == timedelta(
            minutes=30
        )

    def test_user_timezone(self, preference_filter, preference_store):
        # 12:00 UTC is 23:00 in Sydney during daylight saving
        preference_store.save(
            make_preference(quiet_hours=("21:00", "07:00", "Australia/Sydney"))
        )
        assert preference_filter.is_quiet_hours("emp-1", at(12))

    def test_unknown_timezone_falls_back_to_utc(self, preference_filter, preference_store):
        preference_store.save(make_preference(quiet_hours=("11:00", "13:00", "Mars/Base")))
        assert preference_filter.is_quiet_hours("emp-1", at(12))

    def test_no_quiet_hours_configured(self, preference_filter):
        assert not preference_filter.is_quiet_hours("emp-1", at(23))
        assert preference_filter.quiet_hours_remaining(None) is None

    def test_uses_clock_by_default(self, preference_filter, preference_store, clock):
        preference_store.save(make_preference(quiet_hours=("11:00", "13:00")))
        assert preference_filter.is_quiet_hours("emp-1")


class TestHelpers:
    def test_parse_time_of_day(self):
        assert parse_time_of_day("22:30") == 22 * 60 + 30

    def test_same_start_and_end_is_empty(self):
        assert not in_quiet_window(600, 600, 600)

    def test_simple_window(self):
        assert in_quiet_window(700, 600, 800)
        assert not in_quiet_window(800, 600, 800)

    def test_category_toggle(self):
        assert category_toggle(NotificationType.LEARNING_COURSE_COMPLETED) == "learning_updates"
        assert category_toggle(NotificationType.CUSTOM) is None
