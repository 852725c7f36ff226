"""Channel adapter abstract base class.

Every delivery medium (Email, SMS, Push, In-App) implements this interface.
The pipeline core depends only on ``initialize``, ``send``, ``send_bulk``,
``is_healthy`` and ``cleanup``; provider request shapes stay inside the
concrete adapter.
"""

import threading
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence

import structlog

from infrastructure.notifications.errors import ConfigurationError
from infrastructure.notifications.models import Channel, OutboundMessage
from infrastructure.operations import OperationResult, OperationStatus

logger = structlog.get_logger()


class ChannelAdapter(ABC):
    """Abstract base class for channel adapters.

    ``initialize()`` is idempotent and never raises: an adapter whose
    provider credentials are missing logs a warning and reports itself
    unhealthy, so the service still starts with the remaining channels.

    ``send()`` never raises either. Failures come back as an
    ``OperationResult`` with an error status and are recorded by the worker.
    Adapters do not retry internally.

    Example Implementation:
        class EchoAdapter(ChannelAdapter):

            @property
            def channel(self) -> Channel:
                return Channel.IN_APP

            def _configure(self) -> None:
                pass

            def _deliver(self, message: OutboundMessage) -> OperationResult:
                return OperationResult.success(data={"message_id": message.notification_id})
    """

    bulk_max_workers = 10

    def __init__(self):
        self._init_lock = threading.Lock()
        self._initialized = False
        self._healthy = False
        self.log = logger.bind(component="channel_adapter")

    @property
    @abstractmethod
    def channel(self) -> Channel:
        """Channel served by this adapter."""

    @property
    def channel_name(self) -> str:
        return self.channel.value.lower()

    @abstractmethod
    def _configure(self) -> None:
        """Build provider clients from settings.

        Raises:
            ConfigurationError: Credentials or required settings are missing.
        """

    @abstractmethod
    def _deliver(self, message: OutboundMessage) -> OperationResult:
        """Perform one provider call for an already validated message."""

    def validate_recipient(self, message: OutboundMessage) -> OperationResult:
        """Check the recipient address has the shape this channel needs."""
        if not message.recipient:
            return OperationResult.permanent_error(
                f"Recipient required for {self.channel_name}",
                error_code="MISSING_RECIPIENT",
            )
        return OperationResult.success(data={"recipient": message.recipient})

    def initialize(self) -> bool:
        """Configure the adapter once. Returns the resulting health."""
        with self._init_lock:
            if self._initialized:
                return self._healthy
            try:
                self._configure()
                self._healthy = True
                self.log.info("channel_initialized", channel=self.channel_name)
            except ConfigurationError as e:
                self._healthy = False
                self.log.warning(
                    "channel_not_configured",
                    channel=self.channel_name,
                    error=str(e),
                )
            self._initialized = True
            return self._healthy

    def send(self, message: OutboundMessage) -> OperationResult:
        """Deliver one message. Returns a failed result instead of raising."""
        if not self._healthy:
            return OperationResult.error(
                OperationStatus.UNAUTHORIZED,
                f"{self.channel_name} channel is not initialized",
                error_code="CHANNEL_NOT_INITIALIZED",
            )

        validation = self.validate_recipient(message)
        if not validation.is_success:
            return validation

        try:
            result = self._deliver(message)
        except Exception as e:  # noqa: BLE001 - adapter boundary
            self.log.error(
                "channel_send_error",
                channel=self.channel_name,
                notification_id=message.notification_id,
                error=str(e),
                exc_info=True,
            )
            return OperationResult.transient_error(
                f"{self.channel_name} send failed: {e}",
                error_code="CHANNEL_SEND_ERROR",
            )

        if result.is_success:
            self.log.info(
                "channel_send_succeeded",
                channel=self.channel_name,
                notification_id=message.notification_id,
                message_id=result.provider_message_id,
            )
        else:
            self.log.warning(
                "channel_send_failed",
                channel=self.channel_name,
                notification_id=message.notification_id,
                error_code=result.error_code,
                error=result.message,
            )
        return result

    def send_bulk(self, messages: Sequence[OutboundMessage]) -> List[OperationResult]:
        """Send all messages concurrently, one result per message in input order."""
        if not messages:
            return []
        workers = min(self.bulk_max_workers, len(messages))
        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix=f"{self.channel_name}-bulk"
        ) as executor:
            results = list(executor.map(self.send, messages))

        succeeded = sum(1 for r in results if r.is_success)
        self.log.info(
            "channel_bulk_send_completed",
            channel=self.channel_name,
            total=len(results),
            succeeded=succeeded,
            failed=len(results) - succeeded,
        )
        return results

    def is_healthy(self) -> bool:
        return self._initialized and self._healthy

    def cleanup(self) -> None:
        """Release provider clients. The adapter can be initialized again."""
        with self._init_lock:
            self._release()
            self._initialized = False
            self._healthy = False
        self.log.info("channel_cleaned_up", channel=self.channel_name)

    def _release(self) -> None:
        """Hook for subclasses holding sessions or clients."""
