import pytest

from infrastructure.notifications.errors import (
    DeliveryError,
    InvalidStateError,
    NotificationError,
    RecipientResolutionError,
    RetryExhaustedError,
)

pytestmark = pytest.mark.unit


class TestNotificationErrors:
    def test_default_error_code(self):
        assert RetryExhaustedError("done").error_code == "RETRY_EXHAUSTED"

    def test_explicit_error_code(self):
        assert NotificationError("x", error_code="CUSTOM").error_code == "CUSTOM"

    def test_hierarchy(self):
        assert issubclass(RetryExhaustedError, InvalidStateError)
        assert issubclass(RecipientResolutionError, DeliveryError)
        assert issubclass(DeliveryError, NotificationError)
