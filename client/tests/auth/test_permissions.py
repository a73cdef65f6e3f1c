"""Tests for role checks."""

import pytest

from learnhub.auth.permissions import (
    PermissionDeniedError,
    UserRole,
    can_enroll,
    get_role_level,
    has_permission,
    require_role,
)


class TestRoleHierarchy:
    """Tests for role levels."""

    def test_levels_are_ordered(self) -> None:
        assert get_role_level(UserRole.STUDENT) < get_role_level(UserRole.INSTRUCTOR)
        assert get_role_level(UserRole.INSTRUCTOR) < get_role_level(UserRole.ADMIN)

    def test_unknown_role_is_lowest(self) -> None:
        assert get_role_level("superuser") == 0

    def test_string_roles_accepted(self) -> None:
        assert get_role_level("instructor") == get_role_level(UserRole.INSTRUCTOR)


class TestHasPermission:
    """Tests for permission checks."""

    def test_admin_has_instructor_permission(self) -> None:
        assert has_permission(UserRole.ADMIN, UserRole.INSTRUCTOR) is True

    def test_student_lacks_instructor_permission(self) -> None:
        assert has_permission("student", "instructor") is False

    def test_same_level(self) -> None:
        assert has_permission(UserRole.STUDENT, UserRole.STUDENT) is True


class TestCanEnroll:
    """Only students enroll."""

    def test_student_can_enroll(self) -> None:
        assert can_enroll(UserRole.STUDENT) is True
        assert can_enroll("student") is True

    def test_instructor_and_admin_cannot_enroll(self) -> None:
        assert can_enroll(UserRole.INSTRUCTOR) is False
        assert can_enroll(UserRole.ADMIN) is False


class TestRequireRole:
    """Local guard for instructor-only calls."""

    def test_allows_higher_roles(self) -> None:
        require_role(UserRole.INSTRUCTOR, UserRole.INSTRUCTOR)
        require_role("admin", UserRole.INSTRUCTOR)

    @pytest.mark.parametrize("role", [UserRole.STUDENT, "student", None])
    def test_rejects_lower_roles(self, role: UserRole | str | None) -> None:
        with pytest.raises(PermissionDeniedError) as exc_info:
            require_role(role, UserRole.INSTRUCTOR)

        assert exc_info.value.required_role == UserRole.INSTRUCTOR
        assert exc_info.value.message == "This action requires the instructor role"
