"""Dispatch job models."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional

from infrastructure.notifications.models import NotificationPriority, utc_now


class JobState(Enum):
    """Queue-side state of a dispatch job.

    Values:
        WAITING: Eligible for the next free worker
        DELAYED: Invisible to workers until ``scheduled_at``
        ACTIVE: Claimed by exactly one worker
        COMPLETED: Processed; retained for inspection until pruned
        FAILED: Transport attempts exhausted; retained until pruned
    """

    WAITING = "waiting"
    DELAYED = "delayed"
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"


class JobOutcome(Enum):
    """What a job processor did with a job.

    Values:
        COMPLETED: Delivery attempt finished (delivered or recorded as failed)
        SKIPPED: Record was no longer pending; nothing to do
    """

    COMPLETED = "completed"
    SKIPPED = "skipped"


PRIORITY_RANK = {
    NotificationPriority.LOW: 0,
    NotificationPriority.NORMAL: 1,
    NotificationPriority.HIGH: 2,
    NotificationPriority.URGENT: 3,
}


@dataclass
class DispatchJob:
    """Queue entry referencing a notification record.

    Fields:
        notification_id: Record to deliver
        priority: Scheduling preference
        scheduled_at: Earliest time a worker may pick the job up
        attempt: Transport attempts started so far
        id: Assigned by the queue
        sequence: Enqueue order, used for FIFO within a priority
    """

    notification_id: str
    priority: NotificationPriority = NotificationPriority.NORMAL
    scheduled_at: Optional[datetime] = None
    attempt: int = 0

    id: Optional[str] = None
    sequence: int = 0
    state: JobState = JobState.WAITING
    last_error: Optional[str] = None
    claimed_by: Optional[str] = None
    lease_expires_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=utc_now)
    finished_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.notification_id:
            raise ValueError("notification_id is required")
        if self.attempt < 0:
            raise ValueError("attempt must be >= 0")

    @property
    def rank(self) -> int:
        return PRIORITY_RANK[self.priority]

    def snapshot(self) -> "DispatchJob":
        """Detached copy handed to callers outside the queue lock."""
        return replace(self)
