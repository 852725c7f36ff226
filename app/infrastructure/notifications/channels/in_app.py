"""In-app channel: per-user inbox held in process memory."""

import threading
from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Deque, Dict, List, Optional, TYPE_CHECKING

import structlog

from infrastructure.notifications.channels.base import ChannelAdapter
from infrastructure.notifications.models import Channel, OutboundMessage, utc_now
from infrastructure.operations import OperationResult

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = structlog.get_logger()


@dataclass(frozen=True)
class InboxItem:
    notification_id: str
    user_id: str
    subject: Optional[str]
    body: str
    data: dict = field(default_factory=dict)
    received_at: datetime = field(default_factory=utc_now)


InboxListener = Callable[[InboxItem], None]


class InAppAdapter(ChannelAdapter):
    """Stores messages in a bounded per-user inbox and notifies listeners.

    Listeners are how a websocket or polling layer would pick messages up;
    a listener that raises does not fail the delivery.
    """

    def __init__(self, settings: Optional["Settings"] = None, inbox_size: int = 200):
        super().__init__()
        if settings is not None:
            inbox_size = settings.notifications.in_app_inbox_size
        self._inbox_size = inbox_size
        self._lock = threading.Lock()
        self._inboxes: Dict[str, Deque[InboxItem]] = defaultdict(
            lambda: deque(maxlen=self._inbox_size)
        )
        self._listeners: List[InboxListener] = []
        self.log = logger.bind(component="in_app_adapter")

    @property
    def channel(self) -> Channel:
        return Channel.IN_APP

    def _configure(self) -> None:
        """Nothing to configure; the in-app channel is always available."""

    def subscribe(self, listener: InboxListener) -> None:
        self._listeners.append(listener)

    def _deliver(self, message: OutboundMessage) -> OperationResult:
        item = InboxItem(
            notification_id=message.notification_id,
            user_id=message.recipient,
            subject=message.subject,
            body=message.body,
            data=dict(message.data),
        )
        with self._lock:
            self._inboxes[item.user_id].append(item)

        for listener in list(self._listeners):
            try:
                listener(item)
            except Exception as e:  # noqa: BLE001 - listener isolation
                self.log.warning(
                    "in_app_listener_failed",
                    notification_id=item.notification_id,
                    error=str(e),
                )

        return OperationResult.success(
            data={"message_id": item.notification_id},
            message="Stored in user inbox",
        )

    def inbox(self, user_id: str) -> List[InboxItem]:
        """Messages for ``user_id``, oldest first."""
        with self._lock:
            return list(self._inboxes.get(user_id, ()))

    def _release(self) -> None:
        with self._lock:
            self._inboxes.clear()
        self._listeners.clear()
