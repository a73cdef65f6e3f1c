"""Authentication module.

Provides:
- Login, registration and logout
- Session storage of tokens and the user profile
- Role checks and form validators
"""

from .permissions import PermissionDeniedError, UserRole, require_role


__all__ = ["PermissionDeniedError", "UserRole", "require_role"]
