"""Authorization capabilities used by the notification service."""

from infrastructure.auth.authorization import (
    Authorizer,
    DenyAllAuthorizer,
    StaticRoleAuthorizer,
)

__all__ = ["Authorizer", "DenyAllAuthorizer", "StaticRoleAuthorizer"]
