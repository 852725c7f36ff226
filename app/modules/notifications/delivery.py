"""Job processor: delivers one notification record through its channel."""

from typing import Dict, Optional

import structlog

from infrastructure.logging import bind_event_context
from infrastructure.notifications.channels.base import ChannelAdapter
from infrastructure.notifications.errors import (
    RecipientResolutionError,
    RecordNotFoundError,
)
from infrastructure.notifications.models import (
    Channel,
    NotificationRecord,
    NotificationStatus,
    OutboundMessage,
)
from infrastructure.persistence.directory import RecipientDirectory
from infrastructure.persistence.notifications import NotificationStore
from infrastructure.queue.models import DispatchJob, JobOutcome
from modules.notifications.tracking import DeliveryTracker

logger = structlog.get_logger()

_DIRECTORY_FIELDS = {
    Channel.EMAIL: "email",
    Channel.SMS: "phone_number",
    Channel.PUSH: "device_token",
}


class DeliveryProcessor:
    """Implements the worker-side state machine for one dispatch job.

    1. Load the record; a missing record raises ``RecordNotFoundError`` and
       the pool drops the job.
    2. Skip records that are no longer PENDING.
    3. Resolve the channel address and call the adapter.
    4. Mark the record DELIVERED or FAILED. A failed delivery is not
       re-enqueued; it waits for an explicit retry.

    Preferences are not re-checked here; they gated record creation.
    """

    def __init__(
        self,
        store: NotificationStore,
        tracker: DeliveryTracker,
        adapters: Dict[Channel, ChannelAdapter],
        directory: Optional[RecipientDirectory] = None,
    ):
        self.store = store
        self.tracker = tracker
        self.adapters = adapters
        self.directory = directory
        self.log = logger.bind(component="delivery_processor")

    def process(self, job: DispatchJob) -> JobOutcome:
        record = self.store.get(job.notification_id)
        if record is None:
            raise RecordNotFoundError(
                f"Notification {job.notification_id} not found for job {job.id}"
            )

        with bind_event_context(
            correlation_id=record.correlation_id, notification_id=record.id
        ):
            if record.status != NotificationStatus.PENDING:
                self.log.info("delivery_skipped_not_pending", status=record.status.value)
                return JobOutcome.SKIPPED
            self._deliver(record, job)
            return JobOutcome.COMPLETED

    def _deliver(self, record: NotificationRecord, job: DispatchJob) -> None:
        adapter = self.adapters.get(record.channel)
        if adapter is None:
            self.tracker.mark_failed(
                record.id,
                f"No adapter registered for channel {record.channel.value}",
                {"error_code": "CHANNEL_NOT_SUPPORTED", "job_id": job.id},
            )
            return

        try:
            recipient = self.resolve_recipient(record)
        except RecipientResolutionError as e:
            self.tracker.mark_failed(
                record.id, str(e), {"error_code": e.error_code, "job_id": job.id}
            )
            return

        message = OutboundMessage(
            notification_id=record.id,
            channel=record.channel,
            recipient=recipient,
            subject=record.subject,
            body=record.message,
            data=record.data,
            priority=record.priority,
            user_id=record.user_id,
        )
        result = adapter.send(message)

        if result.is_success:
            self.tracker.mark_delivered(
                record.id,
                {
                    "channel": record.channel.value,
                    "message_id": result.provider_message_id,
                    "job_id": job.id,
                },
            )
        else:
            self.tracker.mark_failed(
                record.id,
                result.message,
                {
                    "channel": record.channel.value,
                    "error_code": result.error_code,
                    "status": result.status.value,
                    "retryable": result.is_retryable,
                    "job_id": job.id,
                },
            )

    def resolve_recipient(self, record: NotificationRecord) -> str:
        """Address for the record's channel: explicit address first, then directory.

        Raises:
            RecipientResolutionError: No address available.
        """
        if record.channel == Channel.IN_APP:
            if record.user_id:
                return record.user_id
            raise RecipientResolutionError("In-app notifications require a user_id")

        field_name = _DIRECTORY_FIELDS[record.channel]
        explicit = getattr(record, field_name)
        if explicit:
            return explicit

        if record.user_id and self.directory is not None:
            contact = self.directory.lookup(record.user_id)
            if contact is not None and getattr(contact, field_name):
                return getattr(contact, field_name)

        raise RecipientResolutionError(
            f"No {field_name} known for user {record.user_id or '<none>'}"
        )
