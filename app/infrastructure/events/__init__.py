"""Event ingestion infrastructure.

Exports:
    DomainEvent: Event received from the bus
    EventRouter: Instance-scoped handler registry with parallel dispatch
    DispatchOutcome: Result of routing one event
    MalformedEventError: Raised by handlers for unusable payloads
    EventBus / InMemoryEventBus: Bus abstraction and in-process implementation
    EventConsumer: Connects a router to a bus
"""

from infrastructure.events.bus import EventBus, InMemoryEventBus
from infrastructure.events.consumer import EventConsumer
from infrastructure.events.dispatcher import (
    DispatchOutcome,
    EventRouter,
    MalformedEventError,
)
from infrastructure.events.models import DomainEvent

__all__ = [
    "DispatchOutcome",
    "DomainEvent",
    "EventBus",
    "EventConsumer",
    "EventRouter",
    "InMemoryEventBus",
    "MalformedEventError",
]
