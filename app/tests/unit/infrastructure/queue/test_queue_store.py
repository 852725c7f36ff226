"""Unit tests for InMemoryDispatchQueue."""

import threading

import pytest

from infrastructure.notifications.models import NotificationPriority
from infrastructure.queue import InMemoryDispatchQueue, JobState, QueueConfig

pytestmark = pytest.mark.unit


class TestEnqueue:
    def test_enqueue_returns_waiting_job(self, queue):
        job = queue.enqueue("n-1")
        assert job.id == "job-1"
        assert job.state == JobState.WAITING
        assert job.priority == NotificationPriority.NORMAL
        assert job.attempt == 0

    def test_enqueue_with_delay_is_delayed(self, queue, clock):
        job = queue.enqueue("n-1", delay=30)
        assert job.state == JobState.DELAYED
        assert (job.scheduled_at - clock.now).total_seconds() == 30

    def test_negative_delay_rejected(self, queue):
        with pytest.raises(ValueError):
            queue.enqueue("n-1", delay=-1)

    def test_empty_notification_id_rejected(self, queue):
        with pytest.raises(ValueError):
            queue.enqueue("")

    def test_enqueue_urgent_is_high_without_delay(self, queue):
        job = queue.enqueue_urgent("n-1")
        assert job.priority == NotificationPriority.HIGH
        assert job.state == JobState.WAITING

    def test_returned_job_is_a_snapshot(self, queue):
        job = queue.enqueue("n-1")
        job.state = JobState.FAILED
        assert queue.get_job("job-1").state == JobState.WAITING


class TestClaim:
    def test_claim_marks_active_and_counts_attempt(self, queue):
        queue.enqueue("n-1")
        job = queue.claim_next("w-1", timeout=0)
        assert job.state == JobState.ACTIVE
        assert job.attempt == 1
        assert job.claimed_by == "w-1"

    def test_claim_empty_queue_returns_none(self, queue):
        assert queue.claim_next("w-1", timeout=0) is None

    def test_job_is_claimed_by_only_one_worker(self, queue):
        queue.enqueue("n-1")
        assert queue.claim_next("w-1", timeout=0) is not None
        assert queue.claim_next("w-2", timeout=0) is None

    def test_high_priority_claimed_before_normal(self, queue):
        queue.enqueue("normal-1")
        queue.enqueue("low-1", priority=NotificationPriority.LOW)
        queue.enqueue_urgent("urgent-1")
        queue.enqueue("high-1", priority=NotificationPriority.HIGH)

        order = [queue.claim_next("w", timeout=0).notification_id for _ in range(4)]
        assert order == ["urgent-1", "high-1", "normal-1", "low-1"]

    def test_fifo_within_priority(self, queue):
        for i in range(3):
            queue.enqueue(f"n-{i}")
        order = [queue.claim_next("w", timeout=0).notification_id for _ in range(3)]
        assert order == ["n-0", "n-1", "n-2"]

    def test_delayed_job_not_claimable_until_due(self, queue, clock):
        queue.enqueue("n-1", delay=60)
        assert queue.claim_next("w", timeout=0) is None

        clock.advance(seconds=60)
        job = queue.claim_next("w", timeout=0)
        assert job.notification_id == "n-1"

    def test_stalled_job_is_reclaimed_after_lease(self, clock):
        queue = InMemoryDispatchQueue(QueueConfig(claim_lease_seconds=30), clock=clock)
        queue.enqueue("n-1")
        first = queue.claim_next("w-1", timeout=0)

        clock.advance(seconds=31)
        second = queue.claim_next("w-2", timeout=0)
        assert second.id == first.id
        assert second.claimed_by == "w-2"
        assert second.attempt == 2

    def test_paused_queue_hands_out_nothing(self, queue):
        queue.enqueue("n-1")
        queue.pause()
        assert queue.is_paused
        assert queue.claim_next("w", timeout=0) is None
        queue.resume()
        assert queue.claim_next("w", timeout=0) is not None

    def test_close_wakes_blocked_claimers(self, queue):
        results = []
        waiter = threading.Thread(target=lambda: results.append(queue.claim_next("w")))
        waiter.start()
        queue.close()
        waiter.join(timeout=5)
        assert not waiter.is_alive()
        assert results == [None]
        assert not queue.is_healthy()

    def test_blocked_claimer_receives_new_job(self, queue):
        results = []
        waiter = threading.Thread(
            target=lambda: results.append(queue.claim_next("w", timeout=5))
        )
        waiter.start()
        queue.enqueue("n-1")
        waiter.join(timeout=5)
        assert results[0].notification_id == "n-1"


class TestCompleteAndFail:
    def test_complete(self, queue):
        queue.enqueue("n-1")
        job = queue.claim_next("w", timeout=0)
        queue.complete(job.id, "w")
        assert queue.get_job(job.id).state == JobState.COMPLETED

    def test_complete_ignores_unclaimed_job(self, queue):
        job = queue.enqueue("n-1")
        queue.complete(job.id, "w")
        assert queue.get_job(job.id).state == JobState.WAITING

    def test_complete_from_stale_claim_is_ignored(self, clock):
        queue = InMemoryDispatchQueue(QueueConfig(claim_lease_seconds=10), clock=clock)
        queue.enqueue("n-1")
        first = queue.claim_next("w-1", timeout=0)
        clock.advance(seconds=11)
        second = queue.claim_next("w-2", timeout=0)
        assert second.id == first.id

        assert queue.complete(first.id, "w-1") is False
        stored = queue.get_job(first.id)
        assert stored.state == JobState.ACTIVE
        assert stored.claimed_by == "w-2"

        assert queue.complete(second.id, "w-2") is True
        assert queue.get_job(second.id).state == JobState.COMPLETED

    def test_fail_from_stale_claim_is_ignored(self, clock):
        queue = InMemoryDispatchQueue(QueueConfig(claim_lease_seconds=10), clock=clock)
        queue.enqueue("n-1")
        first = queue.claim_next("w-1", timeout=0)
        clock.advance(seconds=11)
        second = queue.claim_next("w-2", timeout=0)

        assert queue.fail(first.id, "w-1", "late timeout") == JobState.ACTIVE
        stored = queue.get_job(first.id)
        assert stored.claimed_by == "w-2"
        assert stored.last_error is None

        queue.complete(second.id, "w-2")
        assert queue.fail(second.id, "w-2", "after ack") == JobState.COMPLETED
        assert queue.get_job(second.id).state == JobState.COMPLETED

    def test_retryable_failure_reschedules_with_backoff(self, queue, clock):
        queue.enqueue("n-1")
        job = queue.claim_next("w", timeout=0)

        state = queue.fail(job.id, "w", "provider timeout")

        assert state == JobState.DELAYED
        stored = queue.get_job(job.id)
        assert stored.last_error == "provider timeout"
        assert (stored.scheduled_at - clock.now).total_seconds() == 1

    def test_failure_after_max_attempts_is_final(self, queue, clock):
        queue.enqueue("n-1")
        for _ in range(2):
            job = queue.claim_next("w", timeout=0)
            assert queue.fail(job.id, "w", "boom") == JobState.DELAYED
            clock.advance(minutes=5)
        job = queue.claim_next("w", timeout=0)
        assert job.attempt == 3
        assert queue.fail(job.id, "w", "boom") == JobState.FAILED
        assert queue.get_job(job.id).state == JobState.FAILED

    def test_non_retryable_failure_is_final(self, queue):
        queue.enqueue("n-1")
        job = queue.claim_next("w", timeout=0)
        assert queue.fail(job.id, "w", "gone", retryable=False) == JobState.FAILED

    def test_retention_prunes_oldest_completed(self, clock):
        queue = InMemoryDispatchQueue(QueueConfig(keep_completed=2), clock=clock)
        for i in range(3):
            queue.enqueue(f"n-{i}")
            queue.complete(queue.claim_next("w", timeout=0).id, "w")

        assert queue.get_job("job-1") is None
        assert queue.get_stats()["completed"] == 2


class TestInspection:
    def test_stats_cover_every_state(self, queue):
        queue.enqueue("n-1")
        queue.enqueue("n-2", delay=10)
        queue.enqueue("n-3")
        queue.claim_next("w", timeout=0)

        assert queue.get_stats() == {
            "waiting": 1,
            "delayed": 1,
            "active": 1,
            "completed": 0,
            "failed": 0,
        }

    def test_get_jobs_slices_in_enqueue_order(self, queue):
        for i in range(5):
            queue.enqueue(f"n-{i}")
        jobs = queue.get_jobs(JobState.WAITING, start=1, end=3)
        assert [j.notification_id for j in jobs] == ["n-1", "n-2"]

    def test_retry_job_moves_failed_to_waiting(self, queue):
        queue.enqueue("n-1")
        job = queue.claim_next("w", timeout=0)
        queue.fail(job.id, "w", "gone", retryable=False)

        assert queue.retry_job(job.id) is True
        retried = queue.get_job(job.id)
        assert retried.state == JobState.WAITING
        assert retried.attempt == 0
        assert retried.last_error is None

    def test_retry_job_rejects_non_failed(self, queue):
        job = queue.enqueue("n-1")
        assert queue.retry_job(job.id) is False
        assert queue.retry_job("missing") is False

    def test_remove_job(self, queue):
        job = queue.enqueue("n-1")
        assert queue.remove_job(job.id) is True
        assert queue.get_job(job.id) is None

    def test_active_job_cannot_be_removed(self, queue):
        queue.enqueue("n-1")
        job = queue.claim_next("w", timeout=0)
        assert queue.remove_job(job.id) is False
