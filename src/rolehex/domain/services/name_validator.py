"""Role name validation service.

Validates candidate role names according to format and blocklist rules:
- Not blank
- 2 to 50 characters after normalization
- Letters, digits, spaces, hyphens and underscores only
- Not a reserved name (SYSTEM, ROOT, NULL, UNDEFINED)
- No reserved prefix (SYS_, INTERNAL_)

Names are normalized before the length and character checks: surrounding
whitespace is trimmed and internal whitespace runs collapse to one space.
"""

import re

from rolehex.domain.exceptions import NameViolation, RoleNameValidationError


class NameValidator:
    """Stateless role name validator.

    Safe to share between concurrent callers.
    """

    MIN_LENGTH = 2
    MAX_LENGTH = 50

    VALID_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_ -]+$")
    WHITESPACE_RUN = re.compile(r"\s+")

    RESERVED_NAMES = frozenset({"SYSTEM", "ROOT", "NULL", "UNDEFINED"})
    RESERVED_PREFIXES = ("SYS_", "INTERNAL_")

    @classmethod
    def normalize(cls, name: str | None) -> str | None:
        """Trim a name and collapse internal whitespace.

        Args:
            name: Raw name, possibly ``None``.

        Returns:
            Normalized name, or ``None`` when ``name`` is ``None``.

        Examples:
            >>> NameValidator.normalize("  Content   Editor ")
            'Content Editor'
        """
        if name is None:
            return None
        return cls.WHITESPACE_RUN.sub(" ", name.strip())

    @classmethod
    def validate(cls, name: str | None) -> str:
        """Validate a role name and return its normalized form.

        Rules are checked in order and the first failure is raised.
        Validating an already normalized valid name returns it unchanged.

        Args:
            name: Candidate role name.

        Returns:
            The normalized name.

        Raises:
            RoleNameValidationError: With the violated rule as ``violation``.
        """
        normalized = cls.normalize(name)

        if not normalized:
            raise RoleNameValidationError(
                NameViolation.EMPTY_NAME,
                "Role name cannot be null or empty",
            )

        if len(normalized) < cls.MIN_LENGTH:
            raise RoleNameValidationError(
                NameViolation.TOO_SHORT,
                f"Role name must be at least {cls.MIN_LENGTH} characters long",
            )

        if len(normalized) > cls.MAX_LENGTH:
            raise RoleNameValidationError(
                NameViolation.TOO_LONG,
                f"Role name cannot exceed {cls.MAX_LENGTH} characters",
            )

        if not cls.VALID_NAME_PATTERN.match(normalized):
            raise RoleNameValidationError(
                NameViolation.INVALID_CHARACTERS,
                "Role name can only contain letters, numbers, spaces, hyphens and underscores",
            )

        upper = normalized.upper()

        if upper in cls.RESERVED_NAMES:
            raise RoleNameValidationError(
                NameViolation.RESERVED_NAME,
                f"Role name '{normalized}' is reserved and cannot be used",
            )

        if upper.startswith(cls.RESERVED_PREFIXES):
            raise RoleNameValidationError(
                NameViolation.RESERVED_PREFIX,
                "Role name cannot start with system prefixes (SYS_, INTERNAL_)",
            )

        return normalized

    @classmethod
    def is_valid(cls, name: str | None) -> bool:
        """Check if a role name is valid.

        Args:
            name: Candidate role name.

        Returns:
            True if the name passes every rule, False otherwise.
        """
        try:
            cls.validate(name)
        except RoleNameValidationError:
            return False
        return True
