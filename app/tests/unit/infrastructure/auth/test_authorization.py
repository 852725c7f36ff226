import pytest

from infrastructure.auth import DenyAllAuthorizer, StaticRoleAuthorizer

pytestmark = pytest.mark.unit


class TestAuthorizers:
    def test_static_role_authorizer(self):
        authorizer = StaticRoleAuthorizer(admin_user_ids=["hr-admin"])
        assert authorizer.can_manage_notifications("hr-admin")
        assert not authorizer.can_manage_notifications("emp-1")

    def test_deny_all(self):
        assert not DenyAllAuthorizer().can_manage_notifications("hr-admin")
