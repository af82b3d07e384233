"""API schemas for request/response validation."""

from rolehex.infrastructure.api.schemas.role_schemas import (
    CreateRoleRequest,
    ErrorResponse,
    RoleCountResponse,
    RoleResponse,
    UpdateRoleRequest,
)

__all__ = [
    "CreateRoleRequest",
    "ErrorResponse",
    "RoleCountResponse",
    "RoleResponse",
    "UpdateRoleRequest",
]
