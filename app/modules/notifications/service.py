"""Notification service: the dispatch entry point.

Every notification, whether produced by an event handler or submitted
directly, goes through ``NotificationService.submit``:

    preference filter → template → persist PENDING record → enqueue job

All collaborators are injected; ``infrastructure.services.container``
builds the graph once at startup.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from infrastructure.auth import Authorizer, DenyAllAuthorizer
from infrastructure.logging import get_module_logger
from infrastructure.notifications.errors import (
    InvalidStateError,
    NotificationError,
    PermissionDeniedError,
    RecordNotFoundError,
    RetryExhaustedError,
)
from infrastructure.notifications.models import (
    Channel,
    NotificationPriority,
    NotificationRecord,
    NotificationRequest,
    NotificationStatus,
    NotificationType,
    utc_now,
)
from infrastructure.persistence.notifications import NotificationQuery, NotificationStore
from infrastructure.queue.store import DispatchQueue
from modules.notifications.preferences import PreferenceFilter
from modules.notifications.templates import TemplateRenderer
from modules.notifications.tracking import DeliveryTracker

logger = get_module_logger()

SORTABLE_FIELDS = {
    "created_at": lambda r: r.created_at,
    "priority": lambda r: list(NotificationPriority).index(r.priority),
    "type": lambda r: r.type.value,
    "status": lambda r: r.status.value,
    "channel": lambda r: r.channel.value,
}


@dataclass
class BulkItemResult:
    index: int
    success: bool
    notification_id: Optional[str] = None
    skipped: bool = False
    error: Optional[str] = None


@dataclass
class BulkSubmissionResult:
    """Outcome of a bulk submission.

    A preference denial counts as successful (``skipped``), so
    ``successful + failed`` always equals the number of requests.
    """

    successful: int = 0
    failed: int = 0
    skipped: int = 0
    results: List[BulkItemResult] = field(default_factory=list)


@dataclass
class NotificationPage:
    notifications: List[NotificationRecord]
    total: int
    page: int
    limit: int
    total_pages: int
    unread_count: int


class NotificationService:
    """Submission, retry and inbox operations over one notification store."""

    def __init__(
        self,
        store: NotificationStore,
        queue: DispatchQueue,
        preference_filter: PreferenceFilter,
        renderer: TemplateRenderer,
        tracker: DeliveryTracker,
        authorizer: Optional[Authorizer] = None,
        clock: Callable[[], datetime] = utc_now,
        default_max_retries: int = 3,
        quiet_hours_enabled: bool = True,
    ):
        self.store = store
        self.queue = queue
        self.preference_filter = preference_filter
        self.renderer = renderer
        self.tracker = tracker
        self.authorizer = authorizer or DenyAllAuthorizer()
        self.clock = clock
        self.default_max_retries = default_max_retries
        self.quiet_hours_enabled = quiet_hours_enabled

    # Submission

    def submit(
        self, request: Union[NotificationRequest, Dict[str, Any]]
    ) -> Optional[NotificationRecord]:
        """Create and enqueue a notification.

        Returns:
            The PENDING record, or ``None`` when the user's preferences deny
            this type or channel. Callers must check for ``None``.

        Raises:
            ValidationError: The request is malformed.
            TemplateNotFoundError: ``template_id`` is unknown or inactive.
            Exception: The queue refused the job. The record is left FAILED
                and can be retried.
        """
        if not isinstance(request, NotificationRequest):
            request = NotificationRequest.model_validate(request)

        if not self.preference_filter.is_allowed(
            request.user_id, request.type, request.channel
        ):
            logger.info(
                "notification_skipped_by_preference",
                user_id=request.user_id,
                type=request.type.value,
                channel=request.channel.value,
                correlation_id=request.correlation_id,
            )
            return None

        subject, message = request.subject, request.message
        if request.template_id:
            rendered = self.renderer.render(request.template_id, request.data)
            subject = rendered.subject or subject
            message = rendered.body

        record = NotificationRecord(
            type=request.type,
            channel=request.channel,
            priority=request.priority,
            user_id=request.user_id,
            email=request.email,
            phone_number=request.phone_number,
            device_token=request.device_token,
            subject=subject,
            message=message,
            data=request.data,
            correlation_id=request.correlation_id,
            source=request.source,
            template_id=request.template_id,
            max_retries=self.default_max_retries,
            created_at=self.clock(),
        )
        record = self.store.create(record)
        try:
            self._enqueue(record)
        except Exception as e:
            self._restore_failed(record, e)
            raise

        logger.info(
            "notification_created",
            notification_id=record.id,
            type=record.type.value,
            channel=record.channel.value,
            priority=record.priority.value,
            correlation_id=record.correlation_id,
        )
        return record

    def submit_bulk(
        self, requests: Sequence[Union[NotificationRequest, Dict[str, Any]]]
    ) -> BulkSubmissionResult:
        """Submit each request independently; one failure never aborts the batch."""
        result = BulkSubmissionResult()
        for index, request in enumerate(requests):
            try:
                record = self.submit(request)
            except (ValidationError, NotificationError) as e:
                result.failed += 1
                result.results.append(
                    BulkItemResult(index=index, success=False, error=str(e))
                )
                continue
            except Exception as e:  # noqa: BLE001 - store outages count against one item
                logger.error(
                    "bulk_item_failed", index=index, error=str(e), exc_info=True
                )
                result.failed += 1
                result.results.append(
                    BulkItemResult(index=index, success=False, error=str(e))
                )
                continue

            result.successful += 1
            if record is None:
                result.skipped += 1
                result.results.append(BulkItemResult(index=index, success=True, skipped=True))
            else:
                result.results.append(
                    BulkItemResult(index=index, success=True, notification_id=record.id)
                )

        logger.info(
            "bulk_submission_completed",
            total=len(requests),
            successful=result.successful,
            failed=result.failed,
            skipped=result.skipped,
        )
        return result

    def _delivery_delay(self, record: NotificationRecord) -> float:
        """Seconds to hold the job so it lands after the user's quiet hours."""
        if (
            not self.quiet_hours_enabled
            or record.priority == NotificationPriority.URGENT
            or record.channel == Channel.IN_APP
        ):
            return 0.0
        remaining = self.preference_filter.quiet_hours_remaining(
            record.user_id, self.clock()
        )
        return remaining.total_seconds() if remaining else 0.0

    def _enqueue(self, record: NotificationRecord) -> None:
        delay = self._delivery_delay(record)
        if record.priority == NotificationPriority.URGENT:
            job = self.queue.enqueue_urgent(record.id)
        else:
            job = self.queue.enqueue(record.id, priority=record.priority, delay=delay)
        if delay:
            logger.info(
                "notification_deferred_quiet_hours",
                notification_id=record.id,
                delay_seconds=delay,
            )
        self.tracker.record_queued(
            record,
            {
                "job_id": job.id,
                "priority": job.priority.value,
                "delay_seconds": delay,
                "retry_count": record.retry_count,
            },
        )

    def _restore_failed(self, record: NotificationRecord, error: Exception) -> None:
        """Put a record the queue refused back to FAILED so it stays retryable.

        ``record`` is the state before the attempt; its retry count is kept.
        """
        logger.error(
            "notification_enqueue_failed",
            notification_id=record.id,
            retry_count=record.retry_count,
            error=str(error),
        )
        self.store.update(
            record.id,
            {
                "status": NotificationStatus.FAILED,
                "retry_count": record.retry_count,
                "error_message": f"Enqueue failed: {error}",
                "failed_at": record.failed_at or self.clock(),
            },
            expected_status=NotificationStatus.PENDING,
        )

    # Retry

    def retry(
        self, notification_id: str, requesting_user_id: Optional[str] = None
    ) -> NotificationRecord:
        """Move a FAILED record back to PENDING and re-enqueue it.

        Raises:
            RecordNotFoundError: Unknown id.
            PermissionDeniedError: Requester is neither owner nor operator.
            RetryExhaustedError: ``retry_count`` already equals ``max_retries``.
            InvalidStateError: Record is not FAILED (includes losing a race
                with a concurrent retry).
            Exception: The queue refused the job. The record is restored to
                FAILED with its previous retry count.
        """
        record = self._get_authorized(notification_id, requesting_user_id)

        if record.status != NotificationStatus.FAILED:
            raise InvalidStateError(
                f"Notification {notification_id} is {record.status.value}, not FAILED"
            )
        if record.retry_count >= record.max_retries:
            raise RetryExhaustedError(
                f"Notification {notification_id} reached max retries ({record.max_retries})"
            )

        updated = self.store.update(
            notification_id,
            {
                "status": NotificationStatus.PENDING,
                "retry_count": record.retry_count + 1,
                "error_message": None,
                "failed_at": None,
            },
            expected_status=NotificationStatus.FAILED,
        )
        if updated is None:
            raise InvalidStateError(
                f"Notification {notification_id} changed state during retry"
            )

        try:
            self._enqueue(updated)
        except Exception as e:
            self._restore_failed(record, e)
            raise
        logger.info(
            "notification_retried",
            notification_id=notification_id,
            retry_count=updated.retry_count,
            max_retries=updated.max_retries,
        )
        return updated

    # Reads

    def _get_authorized(
        self, notification_id: str, requesting_user_id: Optional[str]
    ) -> NotificationRecord:
        record = self.store.get(notification_id)
        if record is None:
            raise RecordNotFoundError(f"Notification {notification_id} not found")
        if (
            requesting_user_id is not None
            and record.user_id != requesting_user_id
            and not self.authorizer.can_manage_notifications(requesting_user_id)
        ):
            raise PermissionDeniedError(
                f"User {requesting_user_id} may not access notification {notification_id}"
            )
        return record

    def get_notification(
        self, notification_id: str, requesting_user_id: Optional[str] = None
    ) -> NotificationRecord:
        return self._get_authorized(notification_id, requesting_user_id)

    def list_user_notifications(
        self,
        user_id: str,
        notification_type: Optional[NotificationType] = None,
        channel: Optional[Channel] = None,
        status: Optional[NotificationStatus] = None,
        unread_only: bool = False,
        page: int = 1,
        limit: int = 20,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> NotificationPage:
        if sort_by not in SORTABLE_FIELDS:
            raise ValueError(f"Cannot sort by {sort_by}")
        if page < 1 or limit < 1:
            raise ValueError("page and limit must be positive")

        records = self.store.query(
            NotificationQuery(
                user_id=user_id,
                type=notification_type,
                channel=channel,
                status=status,
                unread_only=unread_only,
            )
        )
        records.sort(key=SORTABLE_FIELDS[sort_by], reverse=sort_order.lower() == "desc")

        unread_count = len(
            self.store.query(NotificationQuery(user_id=user_id, unread_only=True))
        )
        offset = (page - 1) * limit
        return NotificationPage(
            notifications=records[offset : offset + limit],
            total=len(records),
            page=page,
            limit=limit,
            total_pages=math.ceil(len(records) / limit),
            unread_count=unread_count,
        )

    def mark_as_read(self, notification_id: str, user_id: str) -> NotificationRecord:
        """Owner-only. Marking an already-read record again is a no-op."""
        record = self.store.get(notification_id)
        if record is None:
            raise RecordNotFoundError(f"Notification {notification_id} not found")
        if record.user_id != user_id:
            raise PermissionDeniedError(
                f"User {user_id} does not own notification {notification_id}"
            )
        return self.tracker.mark_read(record)

    def mark_all_as_read(self, user_id: str) -> int:
        unread = self.store.query(NotificationQuery(user_id=user_id, unread_only=True))
        for record in unread:
            self.tracker.mark_read(record)
        logger.info("notifications_marked_read", user_id=user_id, count=len(unread))
        return len(unread)

    def get_user_statistics(self, user_id: str) -> Dict[str, Any]:
        records = self.store.query(NotificationQuery(user_id=user_id))
        by_type: Dict[str, int] = {}
        by_channel: Dict[str, int] = {}
        by_status: Dict[str, int] = {}
        for r in records:
            by_type[r.type.value] = by_type.get(r.type.value, 0) + 1
            by_channel[r.channel.value] = by_channel.get(r.channel.value, 0) + 1
            by_status[r.status.value] = by_status.get(r.status.value, 0) + 1

        recent = sorted(records, key=lambda r: r.created_at, reverse=True)[:5]
        return {
            "total": len(records),
            "unread": sum(1 for r in records if r.read_at is None),
            "by_type": by_type,
            "by_channel": by_channel,
            "by_status": by_status,
            "recent": recent,
        }

    def get_queue_stats(self) -> Dict[str, int]:
        return self.queue.get_stats()
