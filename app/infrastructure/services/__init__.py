"""
Service wiring.

Provides the settings singleton and the container that builds the
notification object graph.
"""

from infrastructure.services.providers import get_settings

__all__ = [
    "get_settings",
]
