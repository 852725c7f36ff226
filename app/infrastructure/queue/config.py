"""Dispatch queue configuration."""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from infrastructure.configuration import DispatchSettings


@dataclass
class QueueConfig:
    """Transport-level behaviour of the dispatch queue.

    Attributes:
        max_attempts: Attempts per job before it moves to failed
        backoff_base_seconds: Delay after the first failed attempt
        backoff_max_seconds: Cap for exponential backoff
        keep_completed: Completed jobs retained for inspection
        keep_failed: Failed jobs retained for inspection
        claim_lease_seconds: How long a worker can hold a job before it is
            considered stalled and handed to another worker

    Example:
        config = QueueConfig(max_attempts=5, backoff_base_seconds=1)
    """

    max_attempts: int = 3
    backoff_base_seconds: float = 5.0
    backoff_max_seconds: float = 300.0
    keep_completed: int = 100
    keep_failed: int = 50
    claim_lease_seconds: int = 300

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.backoff_base_seconds < 0:
            raise ValueError("backoff_base_seconds must be >= 0")
        if self.backoff_max_seconds < self.backoff_base_seconds:
            raise ValueError("backoff_max_seconds must be >= backoff_base_seconds")
        if self.keep_completed < 0 or self.keep_failed < 0:
            raise ValueError("retention counts must be >= 0")
        if self.claim_lease_seconds < 1:
            raise ValueError("claim_lease_seconds must be at least 1")

    def backoff_seconds(self, attempt: int) -> float:
        """Delay before the next attempt after ``attempt`` attempts have failed.

        min(base * 2 ^ (attempt - 1), max)
        """
        return min(
            self.backoff_base_seconds * (2 ** max(attempt - 1, 0)),
            self.backoff_max_seconds,
        )

    @classmethod
    def from_settings(cls, settings: "DispatchSettings") -> "QueueConfig":
        return cls(
            max_attempts=settings.job_attempts,
            backoff_base_seconds=settings.backoff_base_seconds,
            backoff_max_seconds=settings.backoff_max_seconds,
            keep_completed=settings.keep_completed,
            keep_failed=settings.keep_failed,
            claim_lease_seconds=settings.claim_lease_seconds,
        )
