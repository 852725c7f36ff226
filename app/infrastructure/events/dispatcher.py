"""Event router for the ingestion layer.

Maps event types to handler functions. All handlers registered for one
event run in parallel; a handler failure is logged, does not stop its
siblings, and leaves the event unacknowledged so the bus can redeliver it.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import ValidationError

from infrastructure.events.models import DomainEvent
from infrastructure.logging import get_module_logger

logger = get_module_logger()

EventHandler = Callable[[DomainEvent], Any]


class MalformedEventError(ValueError):
    """Raised by a handler when the event payload cannot be used.

    The event is dropped and acknowledged; redelivering it would fail the
    same way.
    """


@dataclass
class DispatchOutcome:
    """Result of routing one event."""

    event_type: str
    correlation_id: str
    results: List[Any] = field(default_factory=list)
    errors: List[Tuple[str, str]] = field(default_factory=list)
    dropped: Optional[str] = None

    @property
    def acknowledged(self) -> bool:
        """False when any handler failed; the bus should redeliver."""
        return not self.errors


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__name__", type(handler).__name__)


class EventRouter:
    """Instance-scoped registry of event handlers.

    Example:
        router = EventRouter(max_workers=4)
        router.register("employee.created", on_employee_created)
        outcome = router.dispatch(DomainEvent("employee.created", data={...}))
        if not outcome.acknowledged:
            # leave the message for redelivery
    """

    def __init__(self, max_workers: int = 4):
        self._handlers: Dict[str, List[EventHandler]] = {}
        self._max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None
        self._lock = Lock()

    def register(self, event_type: str, handler: EventHandler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(
            "registered_event_handler",
            handler=_handler_name(handler),
            event_type=event_type,
            total_handlers=len(self._handlers[event_type]),
        )

    def handlers_for(self, event_type: str) -> List[EventHandler]:
        return list(self._handlers.get(event_type, ()))

    @property
    def event_types(self) -> List[str]:
        return sorted(self._handlers)

    def dispatch(self, event: DomainEvent) -> DispatchOutcome:
        outcome = DispatchOutcome(
            event_type=event.event_type, correlation_id=event.correlation_id
        )
        handlers = self.handlers_for(event.event_type)
        if not handlers:
            logger.info(
                "event_unhandled",
                event_type=event.event_type,
                correlation_id=event.correlation_id,
            )
            outcome.dropped = "unhandled"
            return outcome

        logger.info(
            "dispatching_event",
            event_type=event.event_type,
            handler_count=len(handlers),
            correlation_id=event.correlation_id,
        )

        if len(handlers) == 1:
            self._collect(outcome, event, handlers[0], lambda: handlers[0](event))
            return outcome

        executor = self._get_executor()
        futures = [(h, executor.submit(h, event)) for h in handlers]
        for handler, future in futures:
            self._collect(outcome, event, handler, future.result)
        return outcome

    def _collect(
        self,
        outcome: DispatchOutcome,
        event: DomainEvent,
        handler: EventHandler,
        call: Callable[[], Any],
    ) -> None:
        name = _handler_name(handler)
        try:
            outcome.results.append(call())
        except (ValidationError, MalformedEventError) as e:
            logger.warning(
                "event_payload_invalid",
                handler=name,
                event_type=event.event_type,
                correlation_id=event.correlation_id,
                error=str(e),
            )
            outcome.dropped = "malformed"
        except Exception as e:  # noqa: BLE001 - sibling handlers must still complete
            logger.error(
                "event_handler_failed",
                handler=name,
                event_type=event.event_type,
                correlation_id=event.correlation_id,
                error=str(e),
                exc_info=True,
            )
            outcome.errors.append((name, str(e)))

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers, thread_name_prefix="event-handler"
                )
            return self._executor

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            if self._executor is not None:
                self._executor.shutdown(wait=wait)
                self._executor = None
