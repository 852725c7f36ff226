"""Infrastructure modules for the notification service.

Centralized infrastructure components:
- configuration: Settings management (Settings, DispatchSettings, EventSettings)
- logging: Structured logging and correlation context (get_module_logger)
- operations: Operation results and provider error classification
- notifications: Pipeline models, errors and channel adapters
- persistence: Notification, preference, template and directory stores
- queue: Dispatch queue and worker pool
- events: Event bus, consumer and router
- auth: Authorization capability
- services: Settings provider and object graph (get_settings)
"""

# Observability
from infrastructure.logging import get_module_logger

# Operations
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

# Settings
from infrastructure.services import get_settings

__all__ = [
    # Observability
    "get_module_logger",
    # Operations
    "OperationResult",
    "OperationStatus",
    # Settings
    "get_settings",
]
