"""Event bus abstraction.

The broker is external to the pipeline. ``EventBus`` is the surface the
consumer needs; ``InMemoryEventBus`` gives at-least-once delivery inside one
process for development and tests.
"""

import threading
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, Dict, Iterable, List, Optional, Protocol

from infrastructure.logging import get_module_logger

logger = get_module_logger()

# Returns True to acknowledge the message, False to request redelivery
MessageCallback = Callable[[str, Dict[str, Any]], bool]


class EventBus(Protocol):
    def subscribe(self, topics: Iterable[str], callback: MessageCallback) -> None: ...

    def unsubscribe(self) -> None: ...

    def publish(self, topic: str, message: Dict[str, Any]) -> None: ...


@dataclass
class _Envelope:
    topic: str
    message: Dict[str, Any]
    deliveries: int = 0


class InMemoryEventBus:
    """Single-subscriber in-process bus with per-topic FIFO ordering.

    Messages are delivered one at a time in publish order. An unacknowledged
    message is redelivered on the next pass and blocks the messages behind
    it on the same topic, up to ``max_deliveries``; after that it moves to
    ``dead_letters``.
    """

    def __init__(self, max_deliveries: int = 5):
        self.max_deliveries = max_deliveries
        self._topics: Dict[str, Deque[_Envelope]] = {}
        self._subscribed: List[str] = []
        self._callback: Optional[MessageCallback] = None
        self._lock = threading.Lock()
        self._delivery_lock = threading.Lock()
        self.dead_letters: List[Dict[str, Any]] = []

    def subscribe(self, topics: Iterable[str], callback: MessageCallback) -> None:
        with self._lock:
            self._subscribed = list(topics)
            self._callback = callback
            for topic in self._subscribed:
                self._topics.setdefault(topic, deque())
        logger.info("event_bus_subscribed", topics=self._subscribed)

    def unsubscribe(self) -> None:
        with self._lock:
            self._subscribed = []
            self._callback = None

    def publish(self, topic: str, message: Dict[str, Any]) -> None:
        with self._lock:
            self._topics.setdefault(topic, deque()).append(_Envelope(topic, message))

    def pending(self, topic: Optional[str] = None) -> int:
        with self._lock:
            if topic is not None:
                return len(self._topics.get(topic, ()))
            return sum(len(q) for t, q in self._topics.items() if t in self._subscribed)

    def deliver_pending(self) -> int:
        """Deliver every queued message on subscribed topics once.

        Returns:
            Number of messages acknowledged.
        """
        acked = 0
        with self._delivery_lock:
            with self._lock:
                callback = self._callback
                topics = list(self._subscribed)
            if callback is None:
                return 0

            for topic in topics:
                while True:
                    with self._lock:
                        queue = self._topics.get(topic)
                        if not queue:
                            break
                        envelope = queue[0]
                    envelope.deliveries += 1
                    ack = callback(topic, envelope.message)
                    with self._lock:
                        if ack:
                            queue.popleft()
                            acked += 1
                            continue
                        if envelope.deliveries >= self.max_deliveries:
                            queue.popleft()
                            self.dead_letters.append(
                                {"topic": topic, "message": envelope.message}
                            )
                            logger.error(
                                "event_dead_lettered",
                                topic=topic,
                                deliveries=envelope.deliveries,
                            )
                            continue
                    # Leave the message at the head for redelivery on the next pass
                    break
        return acked

    def run(self, stop: threading.Event, poll_interval: float = 0.2) -> None:
        """Deliver messages until ``stop`` is set."""
        while not stop.is_set():
            self.deliver_pending()
            stop.wait(poll_interval)
