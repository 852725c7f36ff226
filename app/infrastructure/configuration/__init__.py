"""Infrastructure configuration module - public API.

Centralized configuration for the notification service using Pydantic
BaseSettings with domain-based organization.

Exports:
    Settings: Main settings class (for testing/overrides)
    DispatchSettings: Queue and worker pool settings class
    EventSettings: Event consumer settings class

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    sender = settings.email.EMAIL_FROM_ADDRESS
    concurrency = settings.dispatch.concurrency

    if settings.is_production:
        # Production-specific logic...
    ```
"""

from infrastructure.configuration.settings import Settings
from infrastructure.configuration.infrastructure.dispatch import DispatchSettings
from infrastructure.configuration.infrastructure.events import EventSettings

__all__ = ["Settings", "DispatchSettings", "EventSettings"]
