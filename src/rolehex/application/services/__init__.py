"""Application services for RoleHex."""

from rolehex.application.services.role_service import RoleService

__all__ = ["RoleService"]
