"""Uniform result type returned by channel adapters."""

from dataclasses import dataclass
from typing import Any, Optional

from infrastructure.operations.status import OperationStatus


@dataclass
class OperationResult:
    """Outcome of a single provider call.

    Adapters return one of these instead of raising, so a failed delivery is
    data the worker records rather than an exception it has to interpret.

    Attributes:
        status: High-level outcome
        message: Human-friendly message stored as the record's error message
        data: Optional payload, e.g. ``{"message_id": ...}`` on success
        error_code: Optional machine error code
        retry_after: Seconds the provider asked us to wait, when rate-limited
    """

    status: OperationStatus
    message: str
    data: Optional[Any] = None
    error_code: Optional[str] = None
    retry_after: Optional[int] = None

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    @property
    def is_retryable(self) -> bool:
        """True when a later explicit retry could plausibly succeed."""
        return self.status == OperationStatus.TRANSIENT_ERROR

    @property
    def provider_message_id(self) -> Optional[str]:
        if isinstance(self.data, dict):
            return self.data.get("message_id")
        return None

    @classmethod
    def success(
        cls, data: Optional[Any] = None, message: str = "ok"
    ) -> "OperationResult":
        return cls(status=OperationStatus.SUCCESS, message=message, data=data)

    @classmethod
    def error(
        cls,
        status: OperationStatus,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
        data: Optional[Any] = None,
    ) -> "OperationResult":
        return cls(
            status=status,
            message=message,
            error_code=error_code,
            retry_after=retry_after,
            data=data,
        )

    @classmethod
    def transient_error(
        cls,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
    ) -> "OperationResult":
        """Network failures, timeouts, throttling and provider 5xx responses."""
        return cls.error(
            OperationStatus.TRANSIENT_ERROR, message, error_code, retry_after
        )

    @classmethod
    def permanent_error(
        cls, message: str, error_code: Optional[str] = None
    ) -> "OperationResult":
        """Invalid recipients, rejected payloads and misconfiguration."""
        return cls.error(OperationStatus.PERMANENT_ERROR, message, error_code)
