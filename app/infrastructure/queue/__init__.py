"""Dispatch queue and worker pool.

Usage:
    from infrastructure.queue import InMemoryDispatchQueue, QueueConfig, WorkerPool

    queue = InMemoryDispatchQueue(QueueConfig(max_attempts=3))
    pool = WorkerPool(queue, processor, concurrency=10)
    pool.start()
    queue.enqueue("notification-id")
"""

from infrastructure.queue.config import QueueConfig
from infrastructure.queue.models import DispatchJob, JobOutcome, JobState, PRIORITY_RANK
from infrastructure.queue.store import DispatchQueue, InMemoryDispatchQueue
from infrastructure.queue.worker import JobProcessor, WorkerPool

__all__ = [
    "DispatchJob",
    "DispatchQueue",
    "InMemoryDispatchQueue",
    "JobOutcome",
    "JobProcessor",
    "JobState",
    "PRIORITY_RANK",
    "QueueConfig",
    "WorkerPool",
]
