"""Recipient directory: resolves user ids to channel addresses.

Notifications addressed only by user id (a manager, a recruiter) need an
email address, phone number or device token before an adapter can send
them. The directory is owned by the employee service; the pipeline only
reads from it.
"""

import threading
from dataclasses import dataclass
from typing import Dict, Optional, Protocol


@dataclass(frozen=True)
class ContactDetails:
    user_id: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
    device_token: Optional[str] = None


class RecipientDirectory(Protocol):
    def lookup(self, user_id: str) -> Optional[ContactDetails]: ...


class InMemoryRecipientDirectory:
    def __init__(self):
        self._contacts: Dict[str, ContactDetails] = {}
        self._lock = threading.Lock()

    def lookup(self, user_id: str) -> Optional[ContactDetails]:
        with self._lock:
            return self._contacts.get(user_id)

    def register(self, contact: ContactDetails) -> None:
        with self._lock:
            self._contacts[contact.user_id] = contact
