"""Preference and quiet-hours filter.

Decides, before a record is persisted, whether a user wants a notification
of a given type on a given channel. Quiet hours are evaluated separately;
they defer delivery rather than deny it.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional

import pytz

from infrastructure.logging import get_module_logger
from infrastructure.notifications.errors import PreferenceLookupError
from infrastructure.notifications.models import (
    Channel,
    NotificationType,
    UserPreference,
    utc_now,
)
from infrastructure.persistence.preferences import PreferenceStore

logger = get_module_logger()

MINUTES_PER_DAY = 24 * 60

CHANNEL_TOGGLES = {
    Channel.EMAIL: "email_enabled",
    Channel.SMS: "sms_enabled",
    Channel.PUSH: "push_enabled",
}

CATEGORY_TOGGLES = {
    "EMPLOYEE_": "employee_updates",
    "SYSTEM_": "system_alerts",
    "RECRUITMENT_": "recruitment_updates",
    "PERFORMANCE_": "performance_updates",
    "LEARNING_": "learning_updates",
    "ATTENDANCE_": "attendance_alerts",
}


def parse_time_of_day(value: str) -> int:
    """Convert ``"HH:MM"`` to minutes since midnight."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def in_quiet_window(minutes: int, start: int, end: int) -> bool:
    """True if ``minutes`` falls in ``[start, end)``.

    ``start > end`` means the window wraps midnight, e.g. 22:00-06:00 covers
    23:30 and 05:30 but not 12:00. ``start == end`` is an empty window.
    """
    if start == end:
        return False
    if start < end:
        return start <= minutes < end
    return minutes >= start or minutes < end


def category_toggle(notification_type: NotificationType) -> Optional[str]:
    """Preference attribute gating this type, or ``None`` for uncategorized types."""
    for prefix, attribute in CATEGORY_TOGGLES.items():
        if notification_type.value.startswith(prefix):
            return attribute
    return None


class PreferenceFilter:
    """Allow/deny decisions and quiet-hours checks for one preference store.

    Lookup failures default to allow: losing a notification because the
    preference store is down is worse than sending one the user muted.
    """

    def __init__(
        self,
        store: PreferenceStore,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.clock = clock

    def get_preferences(self, user_id: str) -> UserPreference:
        """Return the user's preferences, creating defaults on first access."""
        preference = self.store.get(user_id)
        if preference is None:
            preference = self.store.save(UserPreference(user_id=user_id))
            logger.info("default_preferences_created", user_id=user_id)
        return preference

    def is_allowed(
        self,
        user_id: Optional[str],
        notification_type: NotificationType,
        channel: Channel,
    ) -> bool:
        if not user_id:
            return True

        try:
            preference = self.get_preferences(user_id)
        except PreferenceLookupError as e:
            logger.error(
                "preference_lookup_failed",
                user_id=user_id,
                error=str(e),
            )
            return True

        channel_toggle = CHANNEL_TOGGLES.get(channel)
        if channel_toggle and not getattr(preference, channel_toggle):
            logger.info(
                "notification_denied_by_channel",
                user_id=user_id,
                channel=channel.value,
            )
            return False

        category = category_toggle(notification_type)
        if category and not getattr(preference, category):
            logger.info(
                "notification_denied_by_category",
                user_id=user_id,
                type=notification_type.value,
                category=category,
            )
            return False

        return True

    def _local_time(self, preference: UserPreference, at: datetime) -> datetime:
        try:
            tz = pytz.timezone(preference.quiet_hours.timezone)
        except pytz.UnknownTimeZoneError:
            logger.warning(
                "quiet_hours_unknown_timezone",
                user_id=preference.user_id,
                timezone=preference.quiet_hours.timezone,
            )
            tz = pytz.utc
        return at.astimezone(tz)

    def quiet_hours_remaining(
        self, user_id: Optional[str], at: Optional[datetime] = None
    ) -> Optional[timedelta]:
        """Time left in the user's quiet window, or ``None`` outside it."""
        if not user_id:
            return None
        try:
            preference = self.get_preferences(user_id)
        except PreferenceLookupError as e:
            logger.error("preference_lookup_failed", user_id=user_id, error=str(e))
            return None
        if preference.quiet_hours is None:
            return None

        local = self._local_time(preference, at or self.clock())
        minutes = local.hour * 60 + local.minute
        start = parse_time_of_day(preference.quiet_hours.start)
        end = parse_time_of_day(preference.quiet_hours.end)
        if not in_quiet_window(minutes, start, end):
            return None

        remaining = (end - minutes) % MINUTES_PER_DAY
        return timedelta(minutes=remaining) - timedelta(
            seconds=local.second, microseconds=local.microsecond
        )

    def is_quiet_hours(self, user_id: Optional[str], at: Optional[datetime] = None) -> bool:
        return self.quiet_hours_remaining(user_id, at) is not None
