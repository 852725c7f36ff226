"""Outcome codes for calls into channel providers and stores."""

from enum import Enum


class OperationStatus(Enum):
    """Status codes for operation results.

    Attributes:
        SUCCESS: The provider accepted the request
        TRANSIENT_ERROR: May succeed later (network, timeout, rate limit, 5xx)
        PERMANENT_ERROR: Will not succeed as submitted (bad address, rejected payload)
        UNAUTHORIZED: Provider credentials missing or rejected
        NOT_FOUND: Recipient or resource unknown to the provider
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
