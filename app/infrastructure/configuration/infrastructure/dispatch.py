"""Dispatch queue and worker pool infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class DispatchSettings(InfrastructureSettings):
    """Dispatch queue and worker pool configuration.

    Transport-level retries configured here are separate from the business
    retry count stored on each notification record.

    Environment Variables:
        DISPATCH_CONCURRENCY: Number of worker threads (default: 10)
        DISPATCH_JOB_ATTEMPTS: Attempts per job before it is marked failed (default: 3)
        DISPATCH_BACKOFF_BASE_SECONDS: Base exponential backoff delay (default: 5s)
        DISPATCH_BACKOFF_MAX_SECONDS: Maximum backoff delay (default: 300s)
        DISPATCH_KEEP_COMPLETED: Completed jobs retained for inspection (default: 100)
        DISPATCH_KEEP_FAILED: Failed jobs retained for inspection (default: 50)
        DISPATCH_CLAIM_LEASE_SECONDS: Claim duration before a job is considered stalled
        DISPATCH_POLL_INTERVAL_SECONDS: Idle wait between claim attempts

    Exponential Backoff:
        Delay calculation: min(base_delay * (2 ^ (attempt - 1)), max_delay)

        Example with defaults (base=5s):
            Attempt 1 failed: 5s
            Attempt 2 failed: 10s
            Attempt 3 failed: job moves to failed
    """

    concurrency: int = Field(
        default=10,
        alias="DISPATCH_CONCURRENCY",
        description="Number of concurrent delivery workers",
    )
    job_attempts: int = Field(
        default=3,
        alias="DISPATCH_JOB_ATTEMPTS",
        description="Transport-level attempts per job",
    )
    backoff_base_seconds: float = Field(
        default=5.0,
        alias="DISPATCH_BACKOFF_BASE_SECONDS",
        description="Base delay for exponential backoff (seconds)",
    )
    backoff_max_seconds: float = Field(
        default=300.0,
        alias="DISPATCH_BACKOFF_MAX_SECONDS",
        description="Maximum delay for exponential backoff (seconds)",
    )
    keep_completed: int = Field(
        default=100,
        alias="DISPATCH_KEEP_COMPLETED",
        description="Completed jobs retained before pruning",
    )
    keep_failed: int = Field(
        default=50,
        alias="DISPATCH_KEEP_FAILED",
        description="Failed jobs retained before pruning",
    )
    claim_lease_seconds: int = Field(
        default=300,
        alias="DISPATCH_CLAIM_LEASE_SECONDS",
        description="Duration a worker holds a job claim (seconds)",
    )
    poll_interval_seconds: float = Field(
        default=0.5,
        alias="DISPATCH_POLL_INTERVAL_SECONDS",
        description="Idle wait between claim attempts (seconds)",
    )
