"""Structlog processors used by the notification service.

Notification payloads carry personal data (addresses, phone numbers, device
tokens) and provider credentials. These processors keep both out of logs.
"""

import re
from typing import Any

SENSITIVE_PATTERNS = frozenset(
    {
        "password",
        "secret",
        "api_key",
        "apikey",
        "authorization",
        "auth_token",
        "credential",
        "private_key",
        "access_token",
        "bearer",
    }
)

# Keys whose values identify a recipient and are partially masked
RECIPIENT_KEYS = frozenset({"email", "phone_number", "recipient", "device_token"})

_EMAIL_RE = re.compile(r"^([^@]{1,2})[^@]*(@.+)$")


def mask_sensitive_data(
    mask_value: str = "***REDACTED***",
    additional_patterns: frozenset[str] | None = None,
):
    """Create a processor that masks credential-like values in log entries.

    Keys are matched case-insensitively against ``SENSITIVE_PATTERNS``.

    Args:
        mask_value: The string to replace sensitive values with.
        additional_patterns: Extra patterns to consider sensitive.

    Returns:
        A structlog processor function.
    """
    patterns = SENSITIVE_PATTERNS
    if additional_patterns:
        patterns = patterns | additional_patterns

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        masked_dict = {}
        for key, value in event_dict.items():
            key_lower = key.lower()
            if value is not None and any(p in key_lower for p in patterns):
                masked_dict[key] = mask_value
            else:
                masked_dict[key] = value
        return masked_dict

    return processor


def mask_recipient(value: str) -> str:
    """Partially mask an address, keeping enough to correlate logs.

    >>> mask_recipient("ann.smith@company.com")
    'an***@company.com'
    >>> mask_recipient("+15551234567")
    '***4567'
    """
    match = _EMAIL_RE.match(value)
    if match:
        return f"{match.group(1)}***{match.group(2)}"
    if len(value) <= 4:
        return "***"
    return f"***{value[-4:]}"


def mask_recipients():
    """Create a processor that partially masks recipient addresses."""

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        for key in RECIPIENT_KEYS.intersection(event_dict):
            value = event_dict[key]
            if isinstance(value, str) and value:
                event_dict[key] = mask_recipient(value)
        return event_dict

    return processor


def truncate_large_values(max_length: int = 500):
    """Create a processor that truncates overly large string values.

    Rendered message bodies can be long; this keeps them from flooding logs.
    """

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        for key, value in event_dict.items():
            if isinstance(value, str) and len(value) > max_length:
                event_dict[key] = (
                    value[:max_length] + f"...[truncated, {len(value)} chars total]"
                )
        return event_dict

    return processor


def add_service_info(service_name: str, version: str = "unknown"):
    """Create a processor that stamps service name and build version."""

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict["service"] = service_name
        event_dict["version"] = version
        return event_dict

    return processor
