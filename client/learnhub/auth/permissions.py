"""Roles of LMS users.

Hierarchical roles:
- ADMIN (level 2): Everything an instructor can do, on every course
- INSTRUCTOR (level 1): Author courses, read analytics for own courses
- STUDENT (level 0): Enroll, take lessons and quizzes, earn certificates
"""

from enum import Enum

from learnhub.core.errors import ClientValidationError


class UserRole(str, Enum):
    """User roles with hierarchical levels."""

    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


ROLE_HIERARCHY: dict[UserRole, int] = {
    UserRole.STUDENT: 0,
    UserRole.INSTRUCTOR: 1,
    UserRole.ADMIN: 2,
}


def get_role_level(role: UserRole | str) -> int:
    """Get the permission level for a role.

    Unknown roles get level 0.
    """
    if isinstance(role, str):
        try:
            role = UserRole(role)
        except ValueError:
            return 0
    return ROLE_HIERARCHY.get(role, 0)


def has_permission(user_role: UserRole | str, required_role: UserRole | str) -> bool:
    """Check if user has at least the required permission level.

    Examples:
        >>> has_permission(UserRole.ADMIN, UserRole.INSTRUCTOR)
        True
        >>> has_permission("student", "instructor")
        False
    """
    return get_role_level(user_role) >= get_role_level(required_role)


def can_enroll(user_role: UserRole | str) -> bool:
    """Only students enroll in courses."""
    return user_role == UserRole.STUDENT


class PermissionDeniedError(ClientValidationError):
    """The current user's role is below the one an action needs."""

    def __init__(self, required_role: UserRole):
        super().__init__(
            f"This action requires the {required_role.value} role", "permission_denied"
        )
        self.required_role = required_role


def require_role(user_role: UserRole | str | None, required_role: UserRole) -> None:
    """Raises PermissionDeniedError unless ``user_role`` reaches ``required_role``.

    Anonymous users (``None``) never do.
    """
    if user_role is None or not has_permission(user_role, required_role):
        raise PermissionDeniedError(required_role)
