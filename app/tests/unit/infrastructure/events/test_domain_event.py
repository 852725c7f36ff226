from datetime import datetime, timezone

import pytest

from infrastructure.events import DomainEvent
from tests.factories import make_bus_message

pytestmark = pytest.mark.unit


class TestDomainEventFromDict:
    def test_wire_format(self):
        event = DomainEvent.from_dict(
            make_bus_message("employee.created", {"employeeId": "E1"}, "corr-9"),
            topic="employee-events",
        )
        assert event.event_type == "employee.created"
        assert event.correlation_id == "corr-9"
        assert event.data == {"employeeId": "E1"}
        assert event.timestamp == datetime(2026, 3, 2, 12, tzinfo=timezone.utc)
        assert event.topic == "employee-events"

    def test_snake_case_keys(self):
        event = DomainEvent.from_dict(
            {"event_type": "system.maintenance", "correlation_id": "c", "data": {}}
        )
        assert event.event_type == "system.maintenance"
        assert event.correlation_id == "c"

    def test_missing_correlation_id_is_generated(self):
        event = DomainEvent.from_dict({"type": "user.authenticated"})
        assert event.correlation_id
        assert event.data == {}

    def test_zulu_timestamp(self):
        event = DomainEvent.from_dict({"type": "x", "timestamp": "2026-03-02T12:00:00Z"})
        assert event.timestamp.tzinfo is not None

    @pytest.mark.parametrize(
        "message",
        [
            "not a dict",
            {"data": {}},
            {"type": ""},
            {"type": "x", "data": ["list"]},
            {"type": "x", "timestamp": "yesterday"},
        ],
    )
    def test_malformed_messages_raise(self, message):
        with pytest.raises(ValueError):
            DomainEvent.from_dict(message)

    def test_to_dict_round_trip_keys(self):
        event = DomainEvent("employee.created", {"a": 1}, correlation_id="c")
        assert set(event.to_dict()) == {"type", "correlationId", "data", "timestamp"}
