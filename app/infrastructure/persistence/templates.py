"""Notification template storage."""

import threading
from typing import Dict, Optional, Protocol

from infrastructure.notifications.models import NotificationTemplate


class TemplateStore(Protocol):
    def get(self, template_id: str) -> Optional[NotificationTemplate]: ...


class InMemoryTemplateStore:
    def __init__(self, templates: Optional[Dict[str, NotificationTemplate]] = None):
        self._templates: Dict[str, NotificationTemplate] = dict(templates or {})
        self._lock = threading.Lock()

    def get(self, template_id: str) -> Optional[NotificationTemplate]:
        with self._lock:
            return self._templates.get(template_id)

    def save(self, template: NotificationTemplate) -> NotificationTemplate:
        with self._lock:
            self._templates[template.id] = template
        return template
