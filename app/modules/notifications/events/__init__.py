"""HR event handling: payload models, handlers and the router binding.

Exports:
    HREventType: Every event type the service understands
    HandlerContext: Per-event submission context
    EVENT_BINDINGS: Event type → payload model and handlers
    build_event_router: Build an EventRouter wired to a NotificationService
"""

from modules.notifications.events.context import HandlerContext
from modules.notifications.events.payloads import HREventType
from modules.notifications.events.registry import EVENT_BINDINGS, build_event_router

__all__ = [
    "EVENT_BINDINGS",
    "HREventType",
    "HandlerContext",
    "build_event_router",
]
