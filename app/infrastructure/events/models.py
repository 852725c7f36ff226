"""Domain event model for the event ingestion layer."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4


@dataclass
class DomainEvent:
    """An event received from the bus.

    The wire format is ``{"type", "correlationId", "data", "timestamp"}``;
    ``from_dict`` also accepts snake_case keys.
    """

    event_type: str
    """The type of event (e.g., 'employee.created')."""

    data: Dict[str, Any] = field(default_factory=dict)
    """Event payload. Validated per type by the handler's payload model."""

    correlation_id: str = field(default_factory=lambda: str(uuid4()))
    """Propagated to every notification produced from this event."""

    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    topic: Optional[str] = None
    """Topic the event was received on, when known."""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.event_type,
            "correlationId": self.correlation_id,
            "data": self.data,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, message: Dict[str, Any], topic: Optional[str] = None) -> "DomainEvent":
        """Build an event from a bus message.

        Raises:
            ValueError: The message has no type, or ``data`` is not an object.
        """
        if not isinstance(message, dict):
            raise ValueError("Invalid event: message must be an object")

        event_type = message.get("type") or message.get("event_type")
        if not event_type or not isinstance(event_type, str):
            raise ValueError("Invalid event: missing type")

        data = message.get("data", {})
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError("Invalid event: data must be an object")

        correlation_id = message.get("correlationId") or message.get("correlation_id")

        raw_timestamp = message.get("timestamp")
        if isinstance(raw_timestamp, str):
            try:
                timestamp = datetime.fromisoformat(raw_timestamp.replace("Z", "+00:00"))
            except ValueError as e:
                raise ValueError(f"Invalid event timestamp: {e}") from e
        elif isinstance(raw_timestamp, datetime):
            timestamp = raw_timestamp
        else:
            timestamp = datetime.now(timezone.utc)

        return cls(
            event_type=event_type,
            data=data,
            correlation_id=str(correlation_id) if correlation_id else str(uuid4()),
            timestamp=timestamp,
            topic=topic,
        )
