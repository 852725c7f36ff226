"""Test data factories for deterministic test data generation."""

from tests.factories.channels import FakeChannelAdapter
from tests.factories.clock import FakeClock
from tests.factories.events import make_bus_message, make_event
from tests.factories.notifications import (
    make_outbound_message,
    make_preference,
    make_record,
    make_request,
)

__all__ = [
    "FakeChannelAdapter",
    "FakeClock",
    "make_bus_message",
    "make_event",
    "make_outbound_message",
    "make_preference",
    "make_record",
    "make_request",
]
