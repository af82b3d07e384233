"""Role API schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class CreateRoleRequest(BaseModel):
    """Request schema for creating a role.

    Only the shape is checked here; naming rules are applied by the service.

    Attributes:
        name: Role name (e.g., 'EDITOR', 'Content Reviewer').
    """

    name: str = Field(min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        """Validate that name is not blank."""
        if not v.strip():
            raise ValueError("Role name cannot be blank")
        return v


class UpdateRoleRequest(CreateRoleRequest):
    """Request schema for renaming a role.

    Attributes:
        name: New role name.
    """


class RoleResponse(BaseModel):
    """Response schema for a role.

    Attributes:
        id: Role ID.
        name: Role name.
        created_at: Creation timestamp, serialized as ``createdAt``.
    """

    id: int
    name: str
    created_at: datetime = Field(serialization_alias="createdAt")


class RoleCountResponse(BaseModel):
    """Response schema for the role count."""

    count: int


class ErrorResponse(BaseModel):
    """Error body returned by every failing role endpoint.

    Attributes:
        code: Machine-readable error code (e.g., 'DUPLICATE_ROLE').
        message: Human-readable error message.
        status: HTTP status code.
    """

    code: str
    message: str
    status: int
