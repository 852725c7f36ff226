"""Unit tests for the worker-side delivery state machine."""

import pytest

from infrastructure.notifications.errors import (
    RecipientResolutionError,
    RecordNotFoundError,
)
from infrastructure.notifications.models import (
    Channel,
    DeliveryAction,
    NotificationPriority,
    NotificationStatus,
)
from infrastructure.operations import OperationResult
from infrastructure.persistence.directory import ContactDetails
from infrastructure.queue.models import DispatchJob, JobOutcome
from modules.notifications.delivery import DeliveryProcessor
from tests.factories import FakeChannelAdapter

pytestmark = pytest.mark.unit


def job_for(record):
    return DispatchJob(notification_id=record.id, id="job-1")


@pytest.fixture
def adapters():
    registered = {
        channel: FakeChannelAdapter(channel=channel)
        for channel in (Channel.EMAIL, Channel.SMS, Channel.IN_APP)
    }
    for adapter in registered.values():
        adapter.initialize()
    return registered


@pytest.fixture
def processor(notification_store, tracker, adapters, directory):
    return DeliveryProcessor(notification_store, tracker, adapters, directory)


class TestProcess:
    def test_successful_delivery(
        self, processor, notification_store, record_factory, adapters, delivery_log
    ):
        record = notification_store.create(
            record_factory(priority=NotificationPriority.HIGH, data={"k": "v"})
        )

        outcome = processor.process(job_for(record))

        assert outcome == JobOutcome.COMPLETED
        assert notification_store.get(record.id).status == NotificationStatus.DELIVERED
        message = adapters[Channel.EMAIL].sent[0]
        assert message.recipient == "ann.smith@company.com"
        assert message.subject == "Welcome"
        assert message.body == "Hi Ann"
        assert message.priority == NotificationPriority.HIGH
        assert message.data == {"k": "v"}
        entry = delivery_log.list_entries(notification_id=record.id)[0]
        assert entry.details["message_id"] == "msg-1"
        assert entry.details["job_id"] == "job-1"

    def test_adapter_failure_marks_record_failed(
        self, notification_store, tracker, directory, record_factory, delivery_log
    ):
        email = FakeChannelAdapter(
            results=[OperationResult.permanent_error("Invalid address", "BAD_RECIPIENT")]
        )
        email.initialize()
        processor = DeliveryProcessor(
            notification_store, tracker, {Channel.EMAIL: email}, directory
        )
        record = notification_store.create(record_factory())

        assert processor.process(job_for(record)) == JobOutcome.COMPLETED

        stored = notification_store.get(record.id)
        assert stored.status == NotificationStatus.FAILED
        assert stored.error_message == "Invalid address"
        details = delivery_log.list_entries(action=DeliveryAction.FAILED)[0].details
        assert details["error_code"] == "BAD_RECIPIENT"
        assert details["retryable"] is False

    def test_not_pending_is_skipped(
        self, processor, notification_store, record_factory, adapters
    ):
        record = notification_store.create(
            record_factory(status=NotificationStatus.DELIVERED)
        )
        assert processor.process(job_for(record)) == JobOutcome.SKIPPED
        assert adapters[Channel.EMAIL].sent == []

    def test_missing_record_raises(self, processor):
        with pytest.raises(RecordNotFoundError):
            processor.process(DispatchJob(notification_id="missing", id="job-1"))

    def test_missing_adapter(self, processor, notification_store, record_factory, delivery_log):
        record = notification_store.create(
            record_factory(channel=Channel.PUSH, device_token="fcm-token")
        )

        processor.process(job_for(record))

        assert notification_store.get(record.id).status == NotificationStatus.FAILED
        details = delivery_log.list_entries(action=DeliveryAction.FAILED)[0].details
        assert details["error_code"] == "CHANNEL_NOT_SUPPORTED"

    def test_unresolvable_recipient(
        self, processor, notification_store, record_factory, delivery_log
    ):
        record = notification_store.create(record_factory(user_id="mgr-9", email=None))

        processor.process(job_for(record))

        stored = notification_store.get(record.id)
        assert stored.status == NotificationStatus.FAILED
        assert "mgr-9" in stored.error_message
        details = delivery_log.list_entries(action=DeliveryAction.FAILED)[0].details
        assert details["error_code"] == "RECIPIENT_RESOLUTION_FAILED"


class TestResolveRecipient:
    def test_explicit_address_wins(self, processor, record_factory, directory):
        directory.register(ContactDetails(user_id="emp-1", email="other@company.com"))
        assert processor.resolve_recipient(record_factory()) == "ann.smith@company.com"

    def test_directory_lookup(self, processor, record_factory, directory):
        directory.register(ContactDetails(user_id="mgr-1", phone_number="+15551234567"))
        record = record_factory(channel=Channel.SMS, user_id="mgr-1", email=None)
        assert processor.resolve_recipient(record) == "+15551234567"

    def test_in_app_uses_user_id(self, processor, record_factory):
        record = record_factory(channel=Channel.IN_APP, email=None)
        assert processor.resolve_recipient(record) == "emp-1"

    def test_in_app_without_user(self, processor, record_factory):
        record = record_factory(channel=Channel.IN_APP, user_id=None)
        with pytest.raises(RecipientResolutionError):
            processor.resolve_recipient(record)

    def test_no_directory(self, notification_store, tracker, record_factory):
        processor = DeliveryProcessor(notification_store, tracker, {})
        with pytest.raises(RecipientResolutionError):
            processor.resolve_recipient(record_factory(email=None))
