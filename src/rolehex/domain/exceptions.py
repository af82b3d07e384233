"""Domain exceptions for role management.

Every error a role operation can raise derives from ``RoleError``. The HTTP
layer maps each family to a status code and an error code.
"""

from enum import Enum


class NameViolation(str, Enum):
    """Reason a candidate role name was rejected."""

    EMPTY_NAME = "EMPTY_NAME"
    TOO_SHORT = "TOO_SHORT"
    TOO_LONG = "TOO_LONG"
    INVALID_CHARACTERS = "INVALID_CHARACTERS"
    RESERVED_NAME = "RESERVED_NAME"
    RESERVED_PREFIX = "RESERVED_PREFIX"


class RoleError(Exception):
    """Base class for all role-related errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class RoleValidationError(RoleError):
    """Raised when input is rejected before reaching the store."""


class RoleNameValidationError(RoleValidationError):
    """Raised when a role name breaks a format or blocklist rule."""

    def __init__(self, violation: NameViolation, message: str) -> None:
        self.violation = violation
        super().__init__(message)


class NullRoleError(RoleValidationError):
    """Raised when an operation requires a role and none was given."""

    def __init__(self, message: str = "Role cannot be null") -> None:
        super().__init__(message)


class SystemRoleProtectedError(RoleValidationError):
    """Raised when deleting a role whose name marks it as a system role."""

    def __init__(self, role_name: str) -> None:
        self.role_name = role_name
        super().__init__(f"System roles cannot be deleted: '{role_name}'")


class InvalidArgumentError(RoleValidationError):
    """Raised for malformed identifiers or search patterns."""


class DuplicateRoleError(RoleError):
    """Raised when a role name is already taken."""

    @classmethod
    def for_name(cls, role_name: str) -> "DuplicateRoleError":
        return cls(f"Role with name '{role_name}' already exists")


class RoleNotFoundError(RoleError):
    """Raised when a lookup-before-act finds no role."""

    @classmethod
    def for_id(cls, role_id: int) -> "RoleNotFoundError":
        return cls(f"Role with ID {role_id} not found")


class PersistenceError(RoleError):
    """Raised when the store fails for a reason other than a name collision."""


# Errors that belong to the normal contract of role operations
EXPECTED_ROLE_ERRORS: tuple[type[RoleError], ...] = (
    RoleValidationError,
    DuplicateRoleError,
    RoleNotFoundError,
)
