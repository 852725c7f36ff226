"""Delivery tracking: record transitions paired with delivery log entries."""

from datetime import datetime
from typing import Any, Callable, Dict, Optional

from infrastructure.logging import get_module_logger
from infrastructure.notifications.models import (
    DeliveryAction,
    DeliveryLogEntry,
    NotificationRecord,
    NotificationStatus,
    utc_now,
)
from infrastructure.persistence.notifications import DeliveryLog, NotificationStore

logger = get_module_logger()


class DeliveryTracker:
    """Applies lifecycle transitions to records and writes the audit trail.

    Transitions out of PENDING are compare-and-set on the record status, so
    a duplicate acknowledgement (two workers, or a redelivered job) is a
    no-op: no second update, no second log entry.

    Log write failures are logged and swallowed; the record state is
    already authoritative by then.
    """

    def __init__(
        self,
        store: NotificationStore,
        delivery_log: DeliveryLog,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.delivery_log = delivery_log
        self.clock = clock

    def record_queued(
        self, record: NotificationRecord, details: Optional[Dict[str, Any]] = None
    ) -> None:
        self._append(record.id, DeliveryAction.QUEUED, details or {})

    def mark_delivered(
        self, notification_id: str, details: Optional[Dict[str, Any]] = None
    ) -> Optional[NotificationRecord]:
        """PENDING → DELIVERED. Returns ``None`` if the record was not pending."""
        record = self.store.get(notification_id)
        if record is None or record.status != NotificationStatus.PENDING:
            logger.info(
                "mark_delivered_ignored",
                notification_id=notification_id,
                status=record.status.value if record else None,
            )
            return None

        now = max(self.clock(), record.created_at)
        updated = self.store.update(
            notification_id,
            {
                "status": NotificationStatus.DELIVERED,
                "sent_at": now,
                "delivered_at": now,
                "error_message": None,
            },
            expected_status=NotificationStatus.PENDING,
        )
        if updated is None:
            logger.info("mark_delivered_lost_race", notification_id=notification_id)
            return None

        self._append(notification_id, DeliveryAction.DELIVERED, details or {}, now)
        logger.info(
            "notification_delivered",
            notification_id=notification_id,
            channel=updated.channel.value,
        )
        return updated

    def mark_failed(
        self,
        notification_id: str,
        error: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> Optional[NotificationRecord]:
        """PENDING → FAILED. Returns ``None`` if the record was not pending."""
        now = self.clock()
        updated = self.store.update(
            notification_id,
            {"status": NotificationStatus.FAILED, "failed_at": now, "error_message": error},
            expected_status=NotificationStatus.PENDING,
        )
        if updated is None:
            logger.info("mark_failed_ignored", notification_id=notification_id)
            return None

        self._append(
            notification_id,
            DeliveryAction.FAILED,
            {"error": error, **(details or {})},
            now,
        )
        logger.warning(
            "notification_failed",
            notification_id=notification_id,
            channel=updated.channel.value,
            retry_count=updated.retry_count,
            max_retries=updated.max_retries,
            error=error,
        )
        return updated

    def mark_read(self, record: NotificationRecord) -> NotificationRecord:
        """Set ``read_at`` once. Already-read records are returned unchanged."""
        if record.read_at is not None:
            return record
        now = self.clock()
        updated = self.store.update(record.id, {"read_at": now}, require_unread=True)
        if updated is None:
            return self.store.get(record.id)
        self._append(record.id, DeliveryAction.READ, {"user_id": record.user_id}, now)
        return updated

    def _append(
        self,
        notification_id: str,
        action: DeliveryAction,
        details: Dict[str, Any],
        timestamp: Optional[datetime] = None,
    ) -> None:
        entry = DeliveryLogEntry(
            notification_id=notification_id,
            action=action,
            details=details,
            timestamp=timestamp or self.clock(),
        )
        try:
            self.delivery_log.append(entry)
        except Exception as e:  # noqa: BLE001 - audit writes never fail a transition
            logger.error(
                "delivery_log_append_failed",
                notification_id=notification_id,
                action=action.value,
                error=str(e),
            )
