"""Authorization capability for notification operations.

Which users may act on other users' notifications (read another user's
record, retry a failed delivery) is a decision of the identity platform,
not of the pipeline. The pipeline asks through this interface.
"""

from typing import Iterable, Protocol


class Authorizer(Protocol):
    """Capability interface injected into the notification service."""

    def can_manage_notifications(self, user_id: str) -> bool:
        """True if ``user_id`` may view or retry notifications it does not own."""
        ...


class StaticRoleAuthorizer:
    """Authorizer backed by a fixed set of operator user ids.

    Example:
        authorizer = StaticRoleAuthorizer(admin_user_ids={"hr-admin-1"})
        authorizer.can_manage_notifications("hr-admin-1")  # True
    """

    def __init__(self, admin_user_ids: Iterable[str] = ()):
        self._admins = frozenset(admin_user_ids)

    def can_manage_notifications(self, user_id: str) -> bool:
        return user_id in self._admins


class DenyAllAuthorizer:
    """Default when no identity integration is configured: owners only."""

    def can_manage_notifications(self, user_id: str) -> bool:
        return False
