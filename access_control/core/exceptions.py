"""
Authorization error taxonomy.

Raised at the guard boundary and mapped to HTTP responses in main.py.
Internal failures are never reported as a denial.
"""

from typing import Optional


class AccessControlError(Exception):
    """Base class for every error raised by the access-control core."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnauthenticatedError(AccessControlError):
    """No resolvable session; the caller should be sent to login."""

    def __init__(self, message: str = "authentication required"):
        super().__init__(message)


class ForbiddenError(AccessControlError):
    """Authenticated, but not allowed."""

    required_permission: Optional[str] = None


class ForbiddenNotAdminError(ForbiddenError):
    def __init__(self, message: str = "admin access required"):
        super().__init__(message)


class ForbiddenMissingPermissionError(ForbiddenError):
    def __init__(self, permission_name: str):
        super().__init__(f"permission '{permission_name}' required")
        self.required_permission = permission_name


class InternalError(AccessControlError):
    """Store or transport failure while evaluating access."""


class RoleNotFoundError(AccessControlError):
    def __init__(self, role_name: str):
        super().__init__(f"Role '{role_name}' not found")
        self.role_name = role_name
