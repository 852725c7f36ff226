"""Notification record store and delivery log.

Both are external collaborators of the pipeline. The protocols below are the
narrow surface the pipeline uses (create, update-by-id, append-log,
query-by-filter); the in-memory implementations back development and tests.
"""

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

from infrastructure.logging import get_module_logger
from infrastructure.notifications.errors import RecordNotFoundError
from infrastructure.notifications.models import (
    Channel,
    DeliveryAction,
    DeliveryLogEntry,
    NotificationRecord,
    NotificationStatus,
    NotificationType,
)

logger = get_module_logger()


@dataclass
class NotificationQuery:
    """Filter for ``NotificationStore.query``. ``None`` fields match anything."""

    user_id: Optional[str] = None
    type: Optional[NotificationType] = None
    channel: Optional[Channel] = None
    status: Optional[NotificationStatus] = None
    unread_only: bool = False
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None

    def matches(self, record: NotificationRecord) -> bool:
        if self.user_id is not None and record.user_id != self.user_id:
            return False
        if self.type is not None and record.type != self.type:
            return False
        if self.channel is not None and record.channel != self.channel:
            return False
        if self.status is not None and record.status != self.status:
            return False
        if self.unread_only and record.read_at is not None:
            return False
        if self.created_from is not None and record.created_at < self.created_from:
            return False
        if self.created_to is not None and record.created_at > self.created_to:
            return False
        return True


class NotificationStore(Protocol):
    """Storage interface for notification records.

    Methods:
        create: Persist a new record
        get: Fetch a record by id, ``None`` when missing
        update: Apply a field set to one record, optionally guarded by status
        query: Records matching a filter, oldest first
    """

    def create(self, record: NotificationRecord) -> NotificationRecord: ...

    def get(self, notification_id: str) -> Optional[NotificationRecord]: ...

    def update(
        self,
        notification_id: str,
        changes: Dict[str, Any],
        expected_status: Optional[NotificationStatus] = None,
        require_unread: bool = False,
    ) -> Optional[NotificationRecord]:
        """Apply ``changes`` to a single record.

        When ``expected_status`` is given the update only happens if the
        stored record currently has that status (compare-and-set). With
        ``require_unread`` it only happens while ``read_at`` is unset.

        Returns:
            The updated record, or ``None`` if a guard did not match.

        Raises:
            RecordNotFoundError: No record with that id.
        """
        ...

    def query(self, filters: NotificationQuery) -> List[NotificationRecord]: ...


class DeliveryLog(Protocol):
    """Append-only log of record transitions."""

    def append(self, entry: DeliveryLogEntry) -> None: ...

    def list_entries(
        self,
        notification_id: Optional[str] = None,
        action: Optional[DeliveryAction] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> List[DeliveryLogEntry]: ...


class InMemoryNotificationStore:
    """Thread-safe in-memory notification store.

    Suitable for development and testing. Each update is atomic for one
    record; there are no multi-record transactions.
    """

    def __init__(self):
        self._records: Dict[str, NotificationRecord] = {}
        self._lock = threading.Lock()

    def create(self, record: NotificationRecord) -> NotificationRecord:
        with self._lock:
            if record.id in self._records:
                raise ValueError(f"Notification {record.id} already exists")
            self._records[record.id] = record
        logger.debug(
            "notification_record_created",
            notification_id=record.id,
            type=record.type.value,
            channel=record.channel.value,
        )
        return record

    def get(self, notification_id: str) -> Optional[NotificationRecord]:
        with self._lock:
            return self._records.get(notification_id)

    def update(
        self,
        notification_id: str,
        changes: Dict[str, Any],
        expected_status: Optional[NotificationStatus] = None,
        require_unread: bool = False,
    ) -> Optional[NotificationRecord]:
        with self._lock:
            current = self._records.get(notification_id)
            if current is None:
                raise RecordNotFoundError(f"Notification {notification_id} not found")
            if expected_status is not None and current.status != expected_status:
                logger.debug(
                    "notification_update_skipped",
                    notification_id=notification_id,
                    expected_status=expected_status.value,
                    actual_status=current.status.value,
                )
                return None
            if require_unread and current.read_at is not None:
                return None
            updated = current.apply(changes)
            self._records[notification_id] = updated
            return updated

    def query(self, filters: NotificationQuery) -> List[NotificationRecord]:
        with self._lock:
            records = list(self._records.values())
        matched = [r for r in records if filters.matches(r)]
        matched.sort(key=lambda r: r.created_at)
        return matched

    def count(self) -> int:
        with self._lock:
            return len(self._records)


class InMemoryDeliveryLog:
    """Thread-safe append-only delivery log kept in memory."""

    def __init__(self):
        self._entries: List[DeliveryLogEntry] = []
        self._lock = threading.Lock()

    def append(self, entry: DeliveryLogEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def list_entries(
        self,
        notification_id: Optional[str] = None,
        action: Optional[DeliveryAction] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> List[DeliveryLogEntry]:
        with self._lock:
            entries = list(self._entries)
        return [
            e
            for e in entries
            if (notification_id is None or e.notification_id == notification_id)
            and (action is None or e.action == action)
            and (since is None or e.timestamp >= since)
            and (until is None or e.timestamp <= until)
        ]
