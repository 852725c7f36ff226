"""Worker pool draining the dispatch queue.

Delivery logic lives behind the ``JobProcessor`` protocol; the pool only
handles claiming, acking and the transport-level failure policy.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional, Protocol

import structlog

from infrastructure.notifications.errors import RecordNotFoundError
from infrastructure.queue.models import DispatchJob, JobOutcome
from infrastructure.queue.store import DispatchQueue

logger = structlog.get_logger()


class JobProcessor(Protocol):
    """Delivery logic for one dispatch job.

    Implementations return a ``JobOutcome`` once the record has reached a
    terminal state for this attempt. Raising ``RecordNotFoundError`` drops
    the job; any other exception is treated as a transport failure and the
    queue retries the job with backoff.

    Example:
        class DeliveryProcessor:
            def process(self, job: DispatchJob) -> JobOutcome:
                record = store.get(job.notification_id)
                if record is None:
                    raise RecordNotFoundError(job.notification_id)
                adapter.send(...)
                return JobOutcome.COMPLETED
    """

    def process(self, job: DispatchJob) -> JobOutcome: ...


def _empty_stats() -> Dict[str, int]:
    return {"processed": 0, "completed": 0, "skipped": 0, "retried": 0, "dropped": 0}


class WorkerPool:
    """Fixed-size pool of threads claiming and processing dispatch jobs.

    Attributes:
        queue: DispatchQueue jobs are claimed from
        processor: JobProcessor performing delivery
        concurrency: Number of worker threads
        poll_interval: Seconds a worker blocks waiting for a job before
            re-checking for shutdown
    """

    def __init__(
        self,
        queue: DispatchQueue,
        processor: JobProcessor,
        concurrency: int = 10,
        poll_interval: float = 0.5,
        name: str = "dispatch-worker",
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.queue = queue
        self.processor = processor
        self.concurrency = concurrency
        self.poll_interval = poll_interval
        self.name = name
        self._stop = threading.Event()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._stats = _empty_stats()
        self._stats_lock = threading.Lock()
        self.log = logger.bind(component="worker_pool", pool=name)

    @property
    def is_running(self) -> bool:
        return self._executor is not None and not self._stop.is_set()

    def start(self) -> None:
        if self._executor is not None:
            return
        self._stop.clear()
        self._executor = ThreadPoolExecutor(
            max_workers=self.concurrency, thread_name_prefix=self.name
        )
        for index in range(self.concurrency):
            self._executor.submit(self._run, f"{self.name}-{index + 1}")
        self.log.info("worker_pool_started", concurrency=self.concurrency)

    def stop(self, wait: bool = True) -> None:
        """Stop claiming new jobs. In-flight deliveries run to completion."""
        if self._executor is None:
            return
        self._stop.set()
        self._executor.shutdown(wait=wait)
        self._executor = None
        self.log.info("worker_pool_stopped", **self.stats())

    def stats(self) -> Dict[str, int]:
        with self._stats_lock:
            return dict(self._stats)

    def run_once(self, worker_id: str = "inline-worker") -> Optional[str]:
        """Claim and process a single job without blocking.

        Returns:
            The stats bucket the job landed in, or ``None`` if nothing was due.
        """
        job = self.queue.claim_next(worker_id, timeout=0)
        if job is None:
            return None
        return self._handle(job, worker_id)

    def drain(self, max_jobs: Optional[int] = None) -> Dict[str, int]:
        """Synchronously process due jobs until none remain.

        Returns:
            Counts for this call only.
        """
        stats = _empty_stats()
        while max_jobs is None or stats["processed"] < max_jobs:
            bucket = self.run_once()
            if bucket is None:
                break
            stats["processed"] += 1
            stats[bucket] += 1
        return stats

    def _run(self, worker_id: str) -> None:
        while not self._stop.is_set():
            try:
                job = self.queue.claim_next(worker_id, timeout=self.poll_interval)
            except Exception as e:  # noqa: BLE001 - keep the worker alive
                self.log.error(
                    "job_claim_failed", worker=worker_id, error=str(e), exc_info=True
                )
                self._stop.wait(self.poll_interval)
                continue
            if job is not None:
                self._handle(job, worker_id)

    def _handle(self, job: DispatchJob, worker_id: str) -> str:
        with structlog.contextvars.bound_contextvars(
            job_id=job.id, notification_id=job.notification_id, worker=worker_id
        ):
            bucket = self._process(job, worker_id)
        with self._stats_lock:
            self._stats["processed"] += 1
            self._stats[bucket] += 1
        return bucket

    def _process(self, job: DispatchJob, worker_id: str) -> str:
        try:
            outcome = self.processor.process(job)
        except RecordNotFoundError as e:
            self.log.error(
                "job_dropped_record_missing",
                job_id=job.id,
                notification_id=job.notification_id,
                error=str(e),
            )
            self.queue.fail(job.id, worker_id, str(e), retryable=False)
            return "dropped"
        except Exception as e:  # noqa: BLE001 - transport failures are retried by the queue
            self.log.error(
                "job_processing_exception",
                job_id=job.id,
                notification_id=job.notification_id,
                attempt=job.attempt,
                error=str(e),
                exc_info=True,
            )
            self.queue.fail(
                job.id, worker_id, f"Unhandled exception: {e}", retryable=True
            )
            return "retried"

        self.queue.complete(job.id, worker_id)
        return "skipped" if outcome == JobOutcome.SKIPPED else "completed"
