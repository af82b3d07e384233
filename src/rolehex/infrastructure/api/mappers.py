"""Conversions from the role entity to API schemas."""

from typing import AsyncIterator

from rolehex.domain.entities import Role
from rolehex.infrastructure.api.schemas import RoleResponse


def to_response(role: Role) -> RoleResponse:
    """Build the response body for a persisted role."""
    return RoleResponse(id=role.id, name=role.name, created_at=role.created_at)


async def to_response_list(roles: AsyncIterator[Role]) -> list[RoleResponse]:
    """Drain a role stream into response bodies, keeping its order."""
    return [to_response(role) async for role in roles]
