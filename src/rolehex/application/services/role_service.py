"""Role service for business logic.

Orchestrates name validation, the uniqueness pre-check and persistence for
role creation, renaming, lookup and deletion.
"""

from contextlib import aclosing
from typing import AsyncIterator, Iterable, Iterator

from rolehex.application.ports import RoleStore
from rolehex.core.logging import get_logger, log_execution
from rolehex.domain.entities import MAX_ROLE_ID, Role
from rolehex.domain.exceptions import (
    EXPECTED_ROLE_ERRORS,
    DuplicateRoleError,
    InvalidArgumentError,
    NullRoleError,
    RoleNotFoundError,
    RoleValidationError,
    SystemRoleProtectedError,
)
from rolehex.domain.services import NameValidator

logger = get_logger(__name__)

traced = log_execution("SERVICE", EXPECTED_ROLE_ERRORS)


class RoleService:
    """Service for role management business logic.

    The duplicate-name check before an insert only saves a round trip; two
    concurrent creates can both pass it. The store's unique constraint
    decides the race and the loser surfaces as ``DuplicateRoleError``.
    """

    def __init__(self, store: RoleStore, validator: type[NameValidator] = NameValidator) -> None:
        """Initialize the role service.

        Args:
            store: Role persistence port.
            validator: Name validator to apply to every incoming name.
        """
        self.store = store
        self.validator = validator

    # =========================================================================
    # Commands
    # =========================================================================

    @traced
    async def create(self, raw_name: str | None) -> Role:
        """Create a new role.

        Args:
            raw_name: Role name as received; it is normalized before use.

        Returns:
            The persisted role, with its store-assigned ID.

        Raises:
            RoleNameValidationError: If the name breaks a naming rule.
            DuplicateRoleError: If a role with the normalized name exists.
            PersistenceError: If the store fails.
        """
        name = self.validator.validate(raw_name)

        if await self.store.exists_by_name(name):
            logger.info("Role creation failed: name already exists", role_name=name)
            raise DuplicateRoleError.for_name(name)

        role = Role.new(name)
        self._ensure_active(role)

        saved = await self.store.save(role)
        logger.info("Role created successfully", role_id=saved.id, role_name=saved.name)
        return saved

    def update(self, existing_role: Role | None, new_raw_name: str | None) -> Role:
        """Rename a role in memory.

        Only the name changes; ``id`` and ``created_at`` are left untouched.
        Nothing is persisted.

        Args:
            existing_role: Role to rename.
            new_raw_name: New name as received.

        Returns:
            The same role instance, renamed.

        Raises:
            NullRoleError: If no role is given.
            RoleNameValidationError: If the new name breaks a naming rule.
            RoleValidationError: If the role has no creation timestamp.
        """
        if existing_role is None:
            raise NullRoleError("Existing role cannot be null")

        existing_role.name = self.validator.validate(new_raw_name)
        self._ensure_active(existing_role)
        return existing_role

    @traced
    async def rename_role(self, role_id: int, new_raw_name: str | None) -> Role:
        """Rename a stored role and persist the change.

        Args:
            role_id: ID of the role to rename.
            new_raw_name: New name as received.

        Returns:
            The persisted role.

        Raises:
            RoleNotFoundError: If no role has this ID.
            DuplicateRoleError: If another role already uses the new name.
        """
        role = await self.get_role_or_raise(role_id)
        previous_name = role.name

        self.update(role, new_raw_name)

        if role.name != previous_name and await self.store.exists_by_name(role.name):
            logger.info("Role rename failed: name already exists", role_name=role.name)
            raise DuplicateRoleError.for_name(role.name)

        saved = await self.store.save(role)
        logger.info(
            "Role renamed successfully",
            role_id=saved.id,
            previous_name=previous_name,
            role_name=saved.name,
        )
        return saved

    def validate_for_deletion(self, role: Role | None) -> None:
        """Check that a role may be deleted.

        Any role whose name contains "SYSTEM" (ignoring case) is protected.
        This is wider than the reserved-name rule applied at creation.

        Raises:
            NullRoleError: If no role is given.
            SystemRoleProtectedError: If the role is a system role.
        """
        if role is None:
            raise NullRoleError()

        if role.name is not None and "SYSTEM" in role.name.upper():
            raise SystemRoleProtectedError(role.name)

    @traced
    async def delete_role(self, role_id: int) -> None:
        """Delete a role by ID.

        Deleting an ID that does not exist is a no-op.

        Raises:
            InvalidArgumentError: If the ID is not a positive number.
            SystemRoleProtectedError: If the role is a system role.
        """
        role = await self.get_role_by_id(role_id)
        if role is None:
            logger.debug("Role already absent, nothing to delete", role_id=role_id)
            return

        self.validate_for_deletion(role)
        await self.store.delete_by_id(role_id)
        logger.info("Role deleted successfully", role_id=role_id, role_name=role.name)

    # =========================================================================
    # Queries
    # =========================================================================

    @traced
    async def get_role_by_id(self, role_id: int | None) -> Role | None:
        """Get a role by ID.

        Returns:
            The role, or None if no role has this ID.

        Raises:
            InvalidArgumentError: If the ID is missing, not positive or out of range.
        """
        if role_id is None:
            raise InvalidArgumentError("Role ID cannot be null")
        if role_id <= 0:
            raise InvalidArgumentError("Role ID must be a positive number")
        if role_id > MAX_ROLE_ID:
            raise InvalidArgumentError(f"Role ID cannot exceed {MAX_ROLE_ID}")

        return await self.store.find_by_id(role_id)

    async def get_role_or_raise(self, role_id: int) -> Role:
        """Get a role by ID, raising when it does not exist.

        Raises:
            RoleNotFoundError: If no role has this ID.
        """
        role = await self.get_role_by_id(role_id)
        if role is None:
            raise RoleNotFoundError.for_id(role_id)
        return role

    @traced
    async def list_roles(self) -> AsyncIterator[Role]:
        """Stream all roles."""
        async with aclosing(self.store.find_all()) as roles:
            async for role in roles:
                yield role

    @traced
    async def search_roles(self, pattern: str | None) -> AsyncIterator[Role]:
        """Stream roles whose name contains ``pattern``, ignoring case.

        Raises:
            InvalidArgumentError: If the pattern is missing or blank.
        """
        if pattern is None or not pattern.strip():
            raise InvalidArgumentError("Name pattern cannot be null or empty")

        async with aclosing(self.store.find_by_name_containing(pattern.strip())) as roles:
            async for role in roles:
                yield role

    @traced
    async def count_roles(self) -> int:
        """Return the number of stored roles."""
        return await self.store.count()

    # =========================================================================
    # Role state
    # =========================================================================

    @staticmethod
    def is_active(role: Role | None) -> bool:
        """A role is active when it has a non-blank name and a creation time."""
        return (
            role is not None
            and role.name is not None
            and bool(role.name.strip())
            and role.created_at is not None
        )

    def filter_active(self, roles: Iterable[Role]) -> Iterator[Role]:
        """Lazily yield the active roles of ``roles`` in their original order."""
        return (role for role in roles if self.is_active(role))

    def _ensure_active(self, role: Role) -> None:
        if not self.is_active(role):
            raise RoleValidationError("Role must be in an active state")
