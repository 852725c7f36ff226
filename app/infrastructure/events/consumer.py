"""Event consumer: bus messages in, routed domain events out."""

from typing import Any, Dict, List

import structlog

from infrastructure.events.bus import EventBus
from infrastructure.events.dispatcher import EventRouter
from infrastructure.events.models import DomainEvent
from infrastructure.logging import bind_event_context

logger = structlog.get_logger()


class EventConsumer:
    """Subscribes a router to the bus.

    Events are handled one at a time per consumer. The consumer never
    raises back into the bus: malformed messages are logged and
    acknowledged, handler failures leave the message unacknowledged.
    """

    def __init__(self, bus: EventBus, router: EventRouter, topics: List[str]):
        self.bus = bus
        self.router = router
        self.topics = list(topics)
        self._subscribed = False
        self.log = logger.bind(component="event_consumer")

    def initialize(self) -> None:
        if self._subscribed:
            return
        self.bus.subscribe(self.topics, self.handle_message)
        self._subscribed = True
        self.log.info("event_consumer_initialized", topics=self.topics)

    def handle_message(self, topic: str, message: Dict[str, Any]) -> bool:
        """Handle one bus message. Returns True to acknowledge it."""
        try:
            event = DomainEvent.from_dict(message, topic=topic)
        except ValueError as e:
            self.log.warning("event_malformed", topic=topic, error=str(e))
            return True

        with bind_event_context(
            correlation_id=event.correlation_id, event_type=event.event_type
        ):
            self.log.info("event_received", topic=topic)
            try:
                outcome = self.router.dispatch(event)
            except Exception as e:  # noqa: BLE001 - the consumer loop must survive
                self.log.error("event_dispatch_failed", error=str(e), exc_info=True)
                return False

            if not outcome.acknowledged:
                self.log.warning(
                    "event_not_acknowledged",
                    failed_handlers=[name for name, _ in outcome.errors],
                )
            return outcome.acknowledged

    def is_healthy(self) -> bool:
        return self._subscribed

    def cleanup(self) -> None:
        if self._subscribed:
            self.bus.unsubscribe()
            self._subscribed = False
        self.router.shutdown()
        self.log.info("event_consumer_stopped")
