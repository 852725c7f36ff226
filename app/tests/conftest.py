import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Ensure the application package root is on sys.path so importing application
# modules (e.g. `infrastructure.queue`) works during pytest collection.
project_root = str(Path(__file__).resolve().parents[1])
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pytest

from infrastructure.configuration import DispatchSettings, Settings
from infrastructure.configuration.features import NotificationFeatureSettings
from infrastructure.configuration.integrations import (
    EmailSettings,
    PushSettings,
    SmsSettings,
)
from infrastructure.persistence import (
    InMemoryDeliveryLog,
    InMemoryNotificationStore,
    InMemoryPreferenceStore,
    InMemoryRecipientDirectory,
    InMemoryTemplateStore,
)
from infrastructure.queue import InMemoryDispatchQueue, QueueConfig
from modules.notifications import (
    DeliveryTracker,
    NotificationService,
    PreferenceFilter,
    TemplateRenderer,
)
from tests.factories import (
    FakeClock,
    make_outbound_message,
    make_record,
    make_request,
)

# Monday 2026-03-02 12:00 UTC
BASE_TIME = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    """Controllable clock starting at BASE_TIME."""
    return FakeClock(BASE_TIME)


@pytest.fixture
def settings():
    """Fully configured settings with test credentials for every channel."""
    return Settings(
        email=EmailSettings(SENDGRID_API_KEY="SG.test-key"),
        sms=SmsSettings(
            TWILIO_ACCOUNT_SID="AC123",
            TWILIO_AUTH_TOKEN="twilio-token",
            TWILIO_FROM_NUMBER="+15550000000",
        ),
        push=PushSettings(FCM_PROJECT_ID="hrms-test"),
        notifications=NotificationFeatureSettings(
            HR_NOTIFICATION_EMAIL="hr@company.com",
            BROADCAST_EMAIL="all-users@company.com",
        ),
        dispatch=DispatchSettings(
            DISPATCH_CONCURRENCY=2,
            DISPATCH_BACKOFF_BASE_SECONDS=1,
            DISPATCH_BACKOFF_MAX_SECONDS=60,
        ),
    )


@pytest.fixture
def notification_store():
    return InMemoryNotificationStore()


@pytest.fixture
def delivery_log():
    return InMemoryDeliveryLog()


@pytest.fixture
def preference_store():
    return InMemoryPreferenceStore()


@pytest.fixture
def template_store():
    return InMemoryTemplateStore()


@pytest.fixture
def directory():
    return InMemoryRecipientDirectory()


@pytest.fixture
def queue(clock):
    return InMemoryDispatchQueue(
        QueueConfig(backoff_base_seconds=1, backoff_max_seconds=60), clock=clock
    )


@pytest.fixture
def tracker(notification_store, delivery_log, clock):
    return DeliveryTracker(notification_store, delivery_log, clock=clock)


@pytest.fixture
def preference_filter(preference_store, clock):
    return PreferenceFilter(preference_store, clock=clock)


@pytest.fixture
def service(notification_store, queue, preference_filter, template_store, tracker, clock):
    return NotificationService(
        store=notification_store,
        queue=queue,
        preference_filter=preference_filter,
        renderer=TemplateRenderer(template_store),
        tracker=tracker,
        clock=clock,
    )


@pytest.fixture
def request_factory():
    return make_request


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def message_factory():
    return make_outbound_message


@pytest.fixture
def advance(clock):
    """Move the shared clock forward: ``advance(minutes=5)``."""

    def _advance(**kwargs):
        clock.now += timedelta(**kwargs)
        return clock.now

    return _advance
