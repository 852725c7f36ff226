import pytest

from infrastructure.persistence.notifications import NotificationQuery
from modules.notifications.events import HandlerContext


@pytest.fixture
def ctx(service, settings):
    return HandlerContext(
        service=service, settings=settings.notifications, correlation_id="corr-42"
    )


@pytest.fixture
def records(notification_store):
    """All stored records, oldest first."""
    return lambda: notification_store.query(NotificationQuery())
