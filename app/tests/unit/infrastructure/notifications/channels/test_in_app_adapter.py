from unittest.mock import MagicMock

import pytest

from infrastructure.notifications.channels.in_app import InAppAdapter
from infrastructure.notifications.models import Channel

pytestmark = pytest.mark.unit


@pytest.fixture
def in_app_message(message_factory):
    def _build(**overrides):
        fields = {"channel": Channel.IN_APP, "recipient": "emp-1"}
        fields.update(overrides)
        return message_factory(**fields)

    return _build


@pytest.fixture
def in_app_adapter():
    adapter = InAppAdapter(inbox_size=2)
    adapter.initialize()
    return adapter


class TestInAppAdapter:
    def test_always_configured(self):
        assert InAppAdapter().initialize() is True

    def test_inbox_size_from_settings(self, settings):
        settings.notifications.in_app_inbox_size = 5
        assert InAppAdapter(settings)._inbox_size == 5

    def test_stores_message_in_user_inbox(self, in_app_adapter, in_app_message):
        result = in_app_adapter.send(in_app_message(notification_id="n-1"))

        assert result.is_success
        assert result.provider_message_id == "n-1"
        inbox = in_app_adapter.inbox("emp-1")
        assert [item.notification_id for item in inbox] == ["n-1"]
        assert in_app_adapter.inbox("emp-2") == []

    def test_inbox_is_bounded(self, in_app_adapter, in_app_message):
        for i in range(3):
            in_app_adapter.send(in_app_message(notification_id=f"n-{i}"))
        assert [i.notification_id for i in in_app_adapter.inbox("emp-1")] == ["n-1", "n-2"]

    def test_listener_notified(self, in_app_adapter, in_app_message):
        listener = MagicMock()
        in_app_adapter.subscribe(listener)
        in_app_adapter.send(in_app_message())
        listener.assert_called_once()
        assert listener.call_args.args[0].user_id == "emp-1"

    def test_failing_listener_does_not_fail_delivery(self, in_app_adapter, in_app_message):
        in_app_adapter.subscribe(MagicMock(side_effect=RuntimeError("socket gone")))
        assert in_app_adapter.send(in_app_message()).is_success

    def test_cleanup_clears_inboxes(self, in_app_adapter, in_app_message):
        in_app_adapter.send(in_app_message())
        in_app_adapter.cleanup()
        assert in_app_adapter.inbox("emp-1") == []
