"""Unit tests for the staff role hierarchy"""

import pytest

from convohub.auth.roles import UserRole, get_allowed_roles, has_permission


class TestHasPermission:

    @pytest.mark.parametrize("role", list(UserRole))
    def test_every_role_satisfies_itself(self, role):
        assert has_permission(role, role)

    def test_owner_satisfies_everything(self):
        assert all(has_permission(UserRole.OWNER, r) for r in UserRole)

    def test_admin_is_not_owner(self):
        assert not has_permission(UserRole.ADMIN, UserRole.OWNER)

    def test_employee_cannot_act_as_admin(self):
        assert not has_permission(UserRole.EMPLOYEE, UserRole.ADMIN)

    def test_guest_is_read_only(self):
        assert has_permission(UserRole.GUEST, UserRole.GUEST)
        assert not has_permission(UserRole.GUEST, UserRole.EMPLOYEE)


def test_allowed_roles_for_employee():
    assert get_allowed_roles(UserRole.EMPLOYEE) == {UserRole.OWNER, UserRole.ADMIN, UserRole.EMPLOYEE}
