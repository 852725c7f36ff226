from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from infrastructure.notifications.models import DeliveryAction, NotificationStatus
from modules.notifications.tracking import DeliveryTracker

pytestmark = pytest.mark.unit


@pytest.fixture
def pending(notification_store, record_factory):
    return notification_store.create(record_factory())


class TestMarkDelivered:
    def test_transitions_pending_record(self, tracker, pending, delivery_log, advance):
        advance(seconds=5)
        updated = tracker.mark_delivered(pending.id, {"message_id": "msg-1"})

        assert updated.status == NotificationStatus.DELIVERED
        assert updated.delivered_at >= updated.created_at
        assert updated.sent_at == updated.delivered_at
        entries = delivery_log.list_entries(notification_id=pending.id)
        assert [e.action for e in entries] == [DeliveryAction.DELIVERED]
        assert entries[0].details == {"message_id": "msg-1"}

    def test_second_acknowledgement_is_noop(self, tracker, pending, delivery_log):
        assert tracker.mark_delivered(pending.id) is not None
        assert tracker.mark_delivered(pending.id) is None
        assert len(delivery_log.list_entries(notification_id=pending.id)) == 1

    def test_missing_record(self, tracker):
        assert tracker.mark_delivered("missing") is None

    def test_delivered_at_never_precedes_created_at(
        self, tracker, notification_store, record_factory, clock
    ):
        # record stamped by a host whose clock runs ahead
        ahead = clock.now + timedelta(minutes=10)
        record = notification_store.create(record_factory(created_at=ahead))
        updated = tracker.mark_delivered(record.id)
        assert updated.delivered_at == record.created_at


class TestMarkFailed:
    def test_transitions_pending_record(self, tracker, pending, delivery_log):
        updated = tracker.mark_failed(pending.id, "Mailbox unavailable", {"error_code": "X"})

        assert updated.status == NotificationStatus.FAILED
        assert updated.error_message == "Mailbox unavailable"
        assert updated.failed_at is not None
        entry = delivery_log.list_entries(notification_id=pending.id)[0]
        assert entry.action == DeliveryAction.FAILED
        assert entry.details == {"error": "Mailbox unavailable", "error_code": "X"}

    def test_not_pending_is_noop(self, tracker, pending, delivery_log):
        tracker.mark_delivered(pending.id)
        assert tracker.mark_failed(pending.id, "late failure") is None
        actions = [e.action for e in delivery_log.list_entries(notification_id=pending.id)]
        assert actions == [DeliveryAction.DELIVERED]


class TestMarkRead:
    def test_sets_read_at_once(self, tracker, pending, delivery_log, advance):
        first = tracker.mark_read(pending)
        read_at = first.read_at
        advance(minutes=1)

        second = tracker.mark_read(first)

        assert second.read_at == read_at
        actions = [e.action for e in delivery_log.list_entries(notification_id=pending.id)]
        assert actions == [DeliveryAction.READ]

    def test_concurrent_reads_log_once(self, tracker, pending, delivery_log):
        # Both callers hold the same unread snapshot.
        first = tracker.mark_read(pending)
        second = tracker.mark_read(pending)

        assert second.read_at == first.read_at
        actions = [e.action for e in delivery_log.list_entries(notification_id=pending.id)]
        assert actions == [DeliveryAction.READ]


class TestLogFailures:
    def test_append_failure_does_not_fail_transition(
        self, notification_store, pending, clock
    ):
        broken_log = MagicMock()
        broken_log.append.side_effect = RuntimeError("log store down")
        tracker = DeliveryTracker(notification_store, broken_log, clock=clock)

        updated = tracker.mark_delivered(pending.id)

        assert updated.status == NotificationStatus.DELIVERED
        broken_log.append.assert_called_once()

    def test_record_queued(self, tracker, pending, delivery_log):
        tracker.record_queued(pending, {"job_id": "job-1"})
        entry = delivery_log.list_entries(action=DeliveryAction.QUEUED)[0]
        assert entry.notification_id == pending.id
        assert entry.details == {"job_id": "job-1"}
