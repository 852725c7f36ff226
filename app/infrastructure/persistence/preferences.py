"""User preference storage."""

import threading
from typing import Dict, Optional, Protocol

from infrastructure.notifications.models import UserPreference


class PreferenceStore(Protocol):
    """Storage interface for per-user notification preferences.

    Implementations raise ``PreferenceLookupError`` when the backend is
    unreachable; a missing user is ``None``, not an error.
    """

    def get(self, user_id: str) -> Optional[UserPreference]: ...

    def save(self, preference: UserPreference) -> UserPreference: ...


class InMemoryPreferenceStore:
    def __init__(self):
        self._preferences: Dict[str, UserPreference] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> Optional[UserPreference]:
        with self._lock:
            return self._preferences.get(user_id)

    def save(self, preference: UserPreference) -> UserPreference:
        with self._lock:
            self._preferences[preference.user_id] = preference
        return preference
