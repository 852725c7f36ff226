"""Infrastructure settings __init__ - exports all infrastructure settings."""

from infrastructure.configuration.infrastructure.dispatch import DispatchSettings
from infrastructure.configuration.infrastructure.events import EventSettings

__all__ = [
    "DispatchSettings",
    "EventSettings",
]
