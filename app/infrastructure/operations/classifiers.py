"""Error classifiers for HTTP channel providers.

Converts ``requests`` responses and exceptions raised while talking to
Twilio, FCM or SendGrid into ``OperationResult`` objects.

Usage:
    from infrastructure.operations.classifiers import (
        classify_http_response,
        classify_request_exception,
    )

    try:
        response = session.post(url, data=payload, timeout=10)
    except requests.RequestException as exc:
        return classify_request_exception(exc, provider="twilio")
    if not response.ok:
        return classify_http_response(response.status_code, response.text, provider="twilio")
"""

from typing import Mapping, Optional

import requests

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus


def _parse_retry_after(headers: Optional[Mapping[str, str]]) -> Optional[int]:
    if not headers:
        return None
    value = headers.get("Retry-After")
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def classify_http_response(
    status_code: int,
    body: str = "",
    provider: str = "provider",
    headers: Optional[Mapping[str, str]] = None,
) -> OperationResult:
    """Classify a non-success HTTP response from a provider.

    Status Code Mapping:
    - 429: Rate limiting → TRANSIENT_ERROR with retry_after
    - 401/403: Credentials rejected → UNAUTHORIZED
    - 404: Unknown recipient/resource → NOT_FOUND
    - 400/422: Rejected payload → PERMANENT_ERROR
    - 5xx: Provider outage → TRANSIENT_ERROR
    - Other: PERMANENT_ERROR

    Args:
        status_code: HTTP status code
        body: Response body, included (truncated) in the message
        provider: Provider name for messages and error codes
        headers: Response headers, used for Retry-After

    Returns:
        OperationResult describing the failure
    """
    detail = (body or "")[:200]
    code_prefix = provider.upper()

    if status_code == 429:
        return OperationResult.transient_error(
            f"{provider} rate limited the request",
            error_code=f"{code_prefix}_RATE_LIMITED",
            retry_after=_parse_retry_after(headers) or 60,
        )
    if status_code in (401, 403):
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED,
            f"{provider} rejected credentials ({status_code})",
            error_code=f"{code_prefix}_UNAUTHORIZED",
        )
    if status_code == 404:
        return OperationResult.error(
            OperationStatus.NOT_FOUND,
            f"{provider} could not find the recipient: {detail}",
            error_code=f"{code_prefix}_NOT_FOUND",
        )
    if 500 <= status_code < 600:
        return OperationResult.transient_error(
            f"{provider} server error ({status_code}): {detail}",
            error_code=f"{code_prefix}_SERVER_ERROR",
        )
    return OperationResult.permanent_error(
        f"{provider} rejected the request ({status_code}): {detail}",
        error_code=f"{code_prefix}_REJECTED",
    )


def classify_request_exception(
    exc: Exception, provider: str = "provider"
) -> OperationResult:
    """Classify an exception raised by ``requests`` while calling a provider.

    Timeouts and connection failures are transient. Anything else that
    escapes ``requests`` (invalid URL, bad payload encoding) is permanent.
    """
    code_prefix = provider.upper()
    if isinstance(exc, requests.Timeout):
        return OperationResult.transient_error(
            f"{provider} request timed out: {exc}",
            error_code=f"{code_prefix}_TIMEOUT",
        )
    if isinstance(exc, requests.ConnectionError):
        return OperationResult.transient_error(
            f"{provider} connection error: {exc}",
            error_code=f"{code_prefix}_CONNECTION_ERROR",
        )
    if isinstance(exc, requests.HTTPError) and exc.response is not None:
        return classify_http_response(
            exc.response.status_code,
            exc.response.text,
            provider=provider,
            headers=exc.response.headers,
        )
    return OperationResult.permanent_error(
        f"{provider} request failed: {type(exc).__name__}: {exc}",
        error_code=f"{code_prefix}_REQUEST_FAILED",
    )
