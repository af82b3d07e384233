"""Repository implementations of the persistence ports."""

from rolehex.infrastructure.persistence.repositories.role_repository import RoleRepository

__all__ = ["RoleRepository"]
