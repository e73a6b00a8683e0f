import pytest
from product_ethics.utils.role_permissions import (
    get_role_permissions,
    validate_role,
    validate_client_role,
    get_allowed_roles,
    roles_allow_contribute,
    roles_allow_manage,
    RoleEnum,
    ROLE_PERMISSIONS,
)


class TestRolePermissions:
    """Unit tests for info channel role permissions."""

    def test_get_role_permissions_owner(self):
        permissions = get_role_permissions("owner")
        assert permissions == {"can_read": True, "can_contribute": True, "can_manage": True}

    def test_get_role_permissions_editor(self):
        """Editors contribute but do not manage the channel."""
        permissions = get_role_permissions("editor")
        assert permissions["can_contribute"] is True
        assert permissions["can_manage"] is False

    def test_get_role_permissions_viewer(self):
        permissions = get_role_permissions("viewer")
        assert permissions["can_read"] is True
        assert permissions["can_contribute"] is False
        assert permissions["can_manage"] is False

    def test_get_role_permissions_invalid_role(self):
        with pytest.raises(ValueError, match="Unknown role: invalid"):
            get_role_permissions("invalid")

    def test_get_role_permissions_returns_copy(self):
        permissions1 = get_role_permissions("owner")
        permissions1["can_manage"] = False
        assert get_role_permissions("owner")["can_manage"] is True
        assert ROLE_PERMISSIONS["owner"]["can_manage"] is True

    def test_validate_role(self):
        for role in get_allowed_roles():
            validate_role(role)
        with pytest.raises(ValueError, match="Invalid role"):
            validate_role("superuser")

    def test_validate_client_role(self):
        validate_client_role("user")
        validate_client_role("admin")
        with pytest.raises(ValueError):
            validate_client_role("owner")

    def test_role_enum_matches_allowed_roles(self):
        assert {r.value for r in RoleEnum} == get_allowed_roles()

    @pytest.mark.parametrize(
        "roles,contribute,manage",
        [
            (["owner"], True, True),
            (["admin"], True, True),
            (["editor"], True, False),
            (["viewer"], False, False),
            (["viewer", "editor"], True, False),
            ([], False, False),
        ],
    )
    def test_role_groups(self, roles, contribute, manage):
        assert roles_allow_contribute(roles) is contribute
        assert roles_allow_manage(roles) is manage
