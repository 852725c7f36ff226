"""
Object graph for the notification service.

``build_container`` wires stores, queue, channel adapters, the dispatch
entry point, the worker pool and the event consumer from one Settings
object. Every collaborator can be overridden, which is how tests swap in
fakes for provider-backed adapters.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Optional

from infrastructure.auth import Authorizer, DenyAllAuthorizer
from infrastructure.configuration import Settings
from infrastructure.events import EventConsumer, EventRouter, InMemoryEventBus
from infrastructure.logging import get_module_logger
from infrastructure.notifications.channels import (
    ChannelAdapter,
    EmailAdapter,
    InAppAdapter,
    PushAdapter,
    SMSAdapter,
)
from infrastructure.notifications.models import Channel, utc_now
from infrastructure.persistence import (
    InMemoryDeliveryLog,
    InMemoryNotificationStore,
    InMemoryPreferenceStore,
    InMemoryRecipientDirectory,
    InMemoryTemplateStore,
)
from infrastructure.queue import InMemoryDispatchQueue, QueueConfig, WorkerPool
from infrastructure.services.providers import get_settings
from modules.notifications import (
    DeliveryAnalytics,
    DeliveryProcessor,
    DeliveryTracker,
    NotificationService,
    PreferenceFilter,
    TemplateRenderer,
)
from modules.notifications.events import build_event_router

logger = get_module_logger()


@dataclass
class Container:
    settings: Settings
    store: InMemoryNotificationStore
    delivery_log: InMemoryDeliveryLog
    preferences: InMemoryPreferenceStore
    templates: InMemoryTemplateStore
    directory: InMemoryRecipientDirectory
    queue: InMemoryDispatchQueue
    adapters: Dict[Channel, ChannelAdapter]
    service: NotificationService
    processor: DeliveryProcessor
    workers: WorkerPool
    analytics: DeliveryAnalytics
    router: EventRouter
    bus: InMemoryEventBus
    consumer: EventConsumer

    def initialize_channels(self) -> Dict[Channel, bool]:
        """Initialize every adapter. A misconfigured channel stays unhealthy."""
        health = {channel: adapter.initialize() for channel, adapter in self.adapters.items()}
        logger.info(
            "channels_initialized",
            healthy=[c.value for c, ok in health.items() if ok],
            unhealthy=[c.value for c, ok in health.items() if not ok],
        )
        return health

    def health(self) -> Dict[str, bool]:
        checks = {
            f"channel_{channel.value.lower()}": adapter.is_healthy()
            for channel, adapter in self.adapters.items()
        }
        checks["queue"] = self.queue.is_healthy()
        checks["consumer"] = self.consumer.is_healthy()
        checks["workers"] = self.workers.is_running
        return checks

    def shutdown(self) -> None:
        self.consumer.cleanup()
        self.workers.stop(wait=True)
        self.queue.close()
        self.router.shutdown()
        for adapter in self.adapters.values():
            adapter.cleanup()
        logger.info("container_shutdown_complete")


def build_default_adapters(settings: Settings) -> Dict[Channel, ChannelAdapter]:
    return {
        Channel.EMAIL: EmailAdapter(settings),
        Channel.SMS: SMSAdapter(settings),
        Channel.PUSH: PushAdapter(settings),
        Channel.IN_APP: InAppAdapter(settings),
    }


def build_container(
    settings: Optional[Settings] = None,
    adapters: Optional[Dict[Channel, ChannelAdapter]] = None,
    authorizer: Optional[Authorizer] = None,
    clock: Callable[[], datetime] = utc_now,
) -> Container:
    """Build the full object graph. Nothing is started."""
    settings = settings or get_settings()
    features = settings.notifications

    store = InMemoryNotificationStore()
    delivery_log = InMemoryDeliveryLog()
    preferences = InMemoryPreferenceStore()
    templates = InMemoryTemplateStore()
    directory = InMemoryRecipientDirectory()
    queue = InMemoryDispatchQueue(
        config=QueueConfig.from_settings(settings.dispatch), clock=clock
    )
    adapters = adapters if adapters is not None else build_default_adapters(settings)

    tracker = DeliveryTracker(store, delivery_log, clock=clock)
    service = NotificationService(
        store=store,
        queue=queue,
        preference_filter=PreferenceFilter(preferences, clock=clock),
        renderer=TemplateRenderer(templates),
        tracker=tracker,
        authorizer=authorizer or DenyAllAuthorizer(),
        clock=clock,
        default_max_retries=features.max_retries,
        quiet_hours_enabled=features.quiet_hours_enabled,
    )
    processor = DeliveryProcessor(store, tracker, adapters, directory=directory)
    workers = WorkerPool(
        queue,
        processor,
        concurrency=settings.dispatch.concurrency,
        poll_interval=settings.dispatch.poll_interval_seconds,
    )
    router = build_event_router(
        service, features, max_workers=settings.events.handler_max_workers
    )
    bus = InMemoryEventBus()
    consumer = EventConsumer(bus, router, settings.events.topics)

    return Container(
        settings=settings,
        store=store,
        delivery_log=delivery_log,
        preferences=preferences,
        templates=templates,
        directory=directory,
        queue=queue,
        adapters=adapters,
        service=service,
        processor=processor,
        workers=workers,
        analytics=DeliveryAnalytics(store, delivery_log),
        router=router,
        bus=bus,
        consumer=consumer,
    )
