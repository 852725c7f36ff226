"""Dispatch queue storage.

Priority queue with delayed visibility, claim leases and bounded retention.
The protocol keeps the pipeline independent of the broker; the in-memory
implementation is suitable for single-instance deployments and tests.
"""

import itertools
import threading
import time
from collections import deque
from datetime import datetime, timedelta
from typing import Callable, Deque, Dict, List, Optional, Protocol

from infrastructure.logging import get_module_logger
from infrastructure.notifications.models import NotificationPriority, utc_now
from infrastructure.queue.config import QueueConfig
from infrastructure.queue.models import DispatchJob, JobState

logger = get_module_logger()

Clock = Callable[[], datetime]


class DispatchQueue(Protocol):
    """Storage interface for dispatch jobs.

    Implementations must guarantee that a job is ACTIVE for at most one
    worker at a time.

    Methods:
        enqueue: Add a job, optionally delayed
        enqueue_urgent: Add a HIGH priority job with no delay
        claim_next: Claim the best eligible job for a worker
        complete: Mark a job claimed by the caller as processed
        fail: Record a failed attempt by the claim holder, rescheduling with
            backoff if allowed
        get_stats: Counts per state
        get_jobs: Jobs in one state, for inspection
        retry_job: Move a failed job back to waiting
        remove_job: Cancel a job that has not started
    """

    def enqueue(
        self,
        notification_id: str,
        priority: NotificationPriority = NotificationPriority.NORMAL,
        delay: float = 0,
    ) -> DispatchJob: ...

    def enqueue_urgent(self, notification_id: str) -> DispatchJob: ...

    def claim_next(
        self, worker_id: str, timeout: Optional[float] = None
    ) -> Optional[DispatchJob]: ...

    def complete(self, job_id: str, worker_id: str) -> bool: ...

    def fail(
        self, job_id: str, worker_id: str, error: str, retryable: bool = True
    ) -> JobState: ...

    def get_stats(self) -> Dict[str, int]: ...

    def get_jobs(self, state: JobState, start: int = 0, end: int = 10) -> List[DispatchJob]: ...

    def retry_job(self, job_id: str) -> bool: ...

    def remove_job(self, job_id: str) -> bool: ...

    def is_healthy(self) -> bool: ...


class InMemoryDispatchQueue:
    """Thread-safe in-memory dispatch queue.

    - HIGH/URGENT jobs are claimed before NORMAL/LOW; FIFO within a rank
    - Delayed jobs become eligible once ``scheduled_at`` has passed
    - An ACTIVE job whose lease expired is treated as stalled and returned
      to waiting so another worker can pick it up
    - Completed and failed jobs are kept up to the configured counts, then
      the oldest are pruned

    Attributes:
        config: QueueConfig controlling attempts, backoff and retention
    """

    def __init__(self, config: Optional[QueueConfig] = None, clock: Clock = utc_now):
        self.config = config or QueueConfig()
        self._clock = clock
        self._jobs: Dict[str, DispatchJob] = {}
        self._completed: Deque[str] = deque()
        self._failed: Deque[str] = deque()
        self._sequence = itertools.count(1)
        self._condition = threading.Condition()
        self._paused = False
        self._closed = False

    def enqueue(
        self,
        notification_id: str,
        priority: NotificationPriority = NotificationPriority.NORMAL,
        delay: float = 0,
    ) -> DispatchJob:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        now = self._clock()
        with self._condition:
            seq = next(self._sequence)
            job = DispatchJob(
                notification_id=notification_id,
                priority=priority,
                id=f"job-{seq}",
                sequence=seq,
                created_at=now,
            )
            if delay > 0:
                job.state = JobState.DELAYED
                job.scheduled_at = now + timedelta(seconds=delay)
            self._jobs[job.id] = job
            self._condition.notify()
            snapshot = job.snapshot()

        logger.info(
            "job_enqueued",
            job_id=snapshot.id,
            notification_id=notification_id,
            priority=priority.value,
            delay_seconds=delay,
        )
        return snapshot

    def enqueue_urgent(self, notification_id: str) -> DispatchJob:
        return self.enqueue(notification_id, priority=NotificationPriority.HIGH, delay=0)

    def claim_next(
        self, worker_id: str, timeout: Optional[float] = None
    ) -> Optional[DispatchJob]:
        """Claim the best eligible job, waiting up to ``timeout`` seconds.

        ``timeout=None`` waits until a job arrives or the queue is closed;
        ``timeout=0`` never blocks.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._condition:
            while not self._closed:
                now = self._clock()
                if not self._paused:
                    self._promote_due(now)
                    job = self._select_waiting()
                    if job is not None:
                        job.state = JobState.ACTIVE
                        job.attempt += 1
                        job.claimed_by = worker_id
                        job.lease_expires_at = now + timedelta(
                            seconds=self.config.claim_lease_seconds
                        )
                        logger.debug(
                            "job_claimed",
                            job_id=job.id,
                            worker=worker_id,
                            attempt=job.attempt,
                        )
                        return job.snapshot()

                wait = self._seconds_until_next_due(now)
                if deadline is not None:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        return None
                    wait = remaining if wait is None else min(wait, remaining)
                self._condition.wait(wait)
            return None

    def complete(self, job_id: str, worker_id: str) -> bool:
        """Ack a job. Only the worker currently holding the claim may ack.

        Returns:
            False when the job is not ACTIVE for ``worker_id`` (lease expired
            and reclaimed, already acked, or unknown); the call is ignored.
        """
        with self._condition:
            job = self._jobs.get(job_id)
            if not self._holds_claim(job, worker_id):
                logger.warning("job_complete_ignored", job_id=job_id, worker=worker_id)
                return False
            job.state = JobState.COMPLETED
            job.finished_at = self._clock()
            job.claimed_by = None
            job.lease_expires_at = None
            self._retain(self._completed, job_id, self.config.keep_completed)
        logger.info("job_completed", job_id=job_id, notification_id=job.notification_id)
        return True

    def fail(
        self, job_id: str, worker_id: str, error: str, retryable: bool = True
    ) -> JobState:
        """Record a failed attempt by the worker holding the claim.

        Retryable failures are rescheduled with exponential backoff until
        ``max_attempts`` is reached; after that, or for non-retryable
        failures, the job moves to FAILED. A call from a worker that no
        longer holds the claim is ignored.

        Returns:
            The job's state after the call. ``FAILED`` for unknown jobs.
        """
        with self._condition:
            job = self._jobs.get(job_id)
            if job is None:
                logger.warning("job_fail_ignored_not_found", job_id=job_id)
                return JobState.FAILED
            if not self._holds_claim(job, worker_id):
                logger.warning(
                    "job_fail_ignored_stale_claim",
                    job_id=job_id,
                    worker=worker_id,
                    state=job.state.value,
                    claimed_by=job.claimed_by,
                )
                return job.state
            job.last_error = error
            job.claimed_by = None
            job.lease_expires_at = None
            now = self._clock()

            if retryable and job.attempt < self.config.max_attempts:
                delay = self.config.backoff_seconds(job.attempt)
                job.state = JobState.DELAYED
                job.scheduled_at = now + timedelta(seconds=delay)
                self._condition.notify()
                logger.info(
                    "job_retry_scheduled",
                    job_id=job_id,
                    attempt=job.attempt,
                    max_attempts=self.config.max_attempts,
                    next_retry_in_seconds=delay,
                    error=error,
                )
                return job.state

            job.state = JobState.FAILED
            job.finished_at = now
            self._retain(self._failed, job_id, self.config.keep_failed)
        logger.warning(
            "job_failed",
            job_id=job_id,
            notification_id=job.notification_id,
            attempts=job.attempt,
            retryable=retryable,
            error=error,
        )
        return JobState.FAILED

    def get_job(self, job_id: str) -> Optional[DispatchJob]:
        with self._condition:
            job = self._jobs.get(job_id)
            return job.snapshot() if job else None

    def get_stats(self) -> Dict[str, int]:
        """Counts per state. A point-in-time snapshot, not authoritative."""
        with self._condition:
            self._promote_due(self._clock())
            stats = {state.value: 0 for state in JobState}
            for job in self._jobs.values():
                stats[job.state.value] += 1
            return stats

    def get_jobs(self, state: JobState, start: int = 0, end: int = 10) -> List[DispatchJob]:
        """Jobs in ``state`` ordered by enqueue order, sliced ``[start:end]``."""
        with self._condition:
            self._promote_due(self._clock())
            jobs = sorted(
                (j for j in self._jobs.values() if j.state == state),
                key=lambda j: j.sequence,
            )
            return [j.snapshot() for j in jobs[start:end]]

    def retry_job(self, job_id: str) -> bool:
        """Operator action: give a FAILED job a fresh set of attempts."""
        with self._condition:
            job = self._jobs.get(job_id)
            if job is None or job.state != JobState.FAILED:
                return False
            if job_id in self._failed:
                self._failed.remove(job_id)
            job.state = JobState.WAITING
            job.attempt = 0
            job.last_error = None
            job.finished_at = None
            job.scheduled_at = None
            self._condition.notify()
        logger.info("job_retried", job_id=job_id)
        return True

    def remove_job(self, job_id: str) -> bool:
        """Cancel a job that no worker has started. Active jobs cannot be removed."""
        with self._condition:
            job = self._jobs.get(job_id)
            if job is None or job.state == JobState.ACTIVE:
                return False
            del self._jobs[job_id]
            for retained in (self._completed, self._failed):
                if job_id in retained:
                    retained.remove(job_id)
        logger.info("job_removed", job_id=job_id, state=job.state.value)
        return True

    def pause(self) -> None:
        with self._condition:
            self._paused = True
        logger.info("queue_paused")

    def resume(self) -> None:
        with self._condition:
            self._paused = False
            self._condition.notify_all()
        logger.info("queue_resumed")

    @property
    def is_paused(self) -> bool:
        return self._paused

    def close(self) -> None:
        """Wake every blocked ``claim_next`` and refuse further claims."""
        with self._condition:
            self._closed = True
            self._condition.notify_all()

    def is_healthy(self) -> bool:
        return not self._closed

    @staticmethod
    def _holds_claim(job: Optional[DispatchJob], worker_id: str) -> bool:
        return (
            job is not None
            and job.state == JobState.ACTIVE
            and job.claimed_by == worker_id
        )

    def _promote_due(self, now: datetime) -> None:
        """Caller holds the lock."""
        for job in self._jobs.values():
            if job.state == JobState.DELAYED and job.scheduled_at <= now:
                job.state = JobState.WAITING
            elif (
                job.state == JobState.ACTIVE
                and job.lease_expires_at is not None
                and job.lease_expires_at <= now
            ):
                logger.warning(
                    "job_stalled",
                    job_id=job.id,
                    worker=job.claimed_by,
                    attempt=job.attempt,
                )
                job.state = JobState.WAITING
                job.claimed_by = None
                job.lease_expires_at = None

    def _select_waiting(self) -> Optional[DispatchJob]:
        best = None
        for job in self._jobs.values():
            if job.state != JobState.WAITING:
                continue
            if best is None or (job.rank, -job.sequence) > (best.rank, -best.sequence):
                best = job
        return best

    def _seconds_until_next_due(self, now: datetime) -> Optional[float]:
        due_times = [
            j.scheduled_at
            for j in self._jobs.values()
            if j.state == JobState.DELAYED and j.scheduled_at is not None
        ]
        if not due_times:
            return None
        return max((min(due_times) - now).total_seconds(), 0.0)

    def _retain(self, retained: Deque[str], job_id: str, limit: int) -> None:
        retained.append(job_id)
        while len(retained) > limit:
            pruned = retained.popleft()
            self._jobs.pop(pruned, None)
