"""Event ingestion infrastructure settings."""

from typing import List

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings

DEFAULT_EVENT_TOPICS = [
    "employee-events",
    "recruitment-events",
    "performance-events",
    "learning-events",
    "notification-events",
    "system-events",
    "attendance-events",
]


class EventSettings(InfrastructureSettings):
    """Domain event consumer configuration.

    Environment Variables:
        EVENT_TOPICS: JSON list of topics to subscribe to
        EVENT_CONSUMER_GROUP: Consumer group identifier
        EVENT_HANDLER_MAX_WORKERS: Threads used to run handlers for one event
    """

    topics: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EVENT_TOPICS),
        alias="EVENT_TOPICS",
        description="Topics the notification consumer subscribes to",
    )
    consumer_group: str = Field(
        default="notification-service-group",
        alias="EVENT_CONSUMER_GROUP",
        description="Consumer group identifier",
    )
    handler_max_workers: int = Field(
        default=4,
        alias="EVENT_HANDLER_MAX_WORKERS",
        description="Parallel handlers per event",
    )
