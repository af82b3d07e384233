"""Persistence port for roles.

Defines the interface every role store adapter must implement. The store
owns identity assignment and durability; the unique constraint on role
names it enforces is the authoritative guard against duplicates.
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator

from rolehex.domain.entities import Role


class RoleStore(ABC):
    """Abstract base class for role stores.

    Every operation is independently invokable and safe for concurrent use
    from separate sessions.
    """

    @abstractmethod
    async def save(self, role: Role) -> Role:
        """Insert a new role or update an existing one.

        A role without ``id`` is inserted and receives one; ``created_at`` is
        stamped if missing. A role with ``id`` updates the matching row.

        Returns:
            The persisted role.

        Raises:
            DuplicateRoleError: If the name collides with another row.
            PersistenceError: If the store fails for any other reason.
        """
        ...

    @abstractmethod
    async def find_by_id(self, role_id: int) -> Role | None:
        """Get a role by ID, or None if no row matches."""
        ...

    @abstractmethod
    def find_all(self) -> AsyncIterator[Role]:
        """Stream every role. Order is unspecified."""
        ...

    @abstractmethod
    async def exists_by_name(self, name: str) -> bool:
        """Check for a role with exactly this name (case-sensitive)."""
        ...

    @abstractmethod
    def find_by_name_containing(self, pattern: str) -> AsyncIterator[Role]:
        """Stream roles whose name contains ``pattern``, ignoring case."""
        ...

    @abstractmethod
    async def find_by_name(self, name: str) -> Role | None:
        """Get a role by exact, case-sensitive name."""
        ...

    @abstractmethod
    async def delete_by_id(self, role_id: int) -> None:
        """Delete a role by ID. Deleting a missing ID is not an error."""
        ...

    @abstractmethod
    async def count(self) -> int:
        """Return the total number of roles."""
        ...
