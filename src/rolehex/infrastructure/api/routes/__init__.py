"""API routers for RoleHex."""

from rolehex.infrastructure.api.routes.roles_router import router as roles_router

__all__ = ["roles_router"]
