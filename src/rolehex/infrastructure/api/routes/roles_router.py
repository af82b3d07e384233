"""Roles API routes.

Binds the role endpoints to ``RoleService``. Errors raised by the service
are turned into responses by the global exception handlers.
"""

from typing import Annotated

from fastapi import APIRouter, Query, status

from rolehex.core.logging import get_logger
from rolehex.domain.exceptions import RoleNotFoundError
from rolehex.infrastructure.api.dependencies import RoleServiceDep
from rolehex.infrastructure.api.mappers import to_response, to_response_list
from rolehex.infrastructure.api.schemas import (
    CreateRoleRequest,
    ErrorResponse,
    RoleCountResponse,
    RoleResponse,
    UpdateRoleRequest,
)

logger = get_logger(__name__)

router = APIRouter()

INVALID_REQUEST = {400: {"model": ErrorResponse, "description": "Invalid request"}}
NOT_FOUND = {404: {"model": ErrorResponse, "description": "Role not found"}}
CONFLICT = {409: {"model": ErrorResponse, "description": "Role name already exists"}}


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=list[RoleResponse],
)
async def list_roles(role_service: RoleServiceDep) -> list[RoleResponse]:
    """List all roles.

    Returns:
        Every stored role; an empty list when there are none.
    """
    items = await to_response_list(role_service.list_roles())
    logger.debug("Roles listed", count=len(items))
    return items


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=RoleResponse,
    responses={**INVALID_REQUEST, **CONFLICT},
)
async def create_role(
    role_request: CreateRoleRequest,
    role_service: RoleServiceDep,
) -> RoleResponse:
    """Create a new role.

    The name is normalized (trimmed, inner whitespace collapsed) before it
    is checked and stored.

    Args:
        role_request: Role creation request.
        role_service: Role service.

    Returns:
        Created role.
    """
    role = await role_service.create(role_request.name)
    return to_response(role)


@router.get(
    "/search",
    status_code=status.HTTP_200_OK,
    response_model=list[RoleResponse],
    responses=INVALID_REQUEST,
)
async def search_roles(
    role_service: RoleServiceDep,
    name: Annotated[str | None, Query(description="Case-insensitive name fragment")] = None,
) -> list[RoleResponse]:
    """Search roles whose name contains a fragment, ignoring case.

    Args:
        role_service: Role service.
        name: Name fragment to search for. Required and not blank.

    Returns:
        Matching roles.
    """
    items = await to_response_list(role_service.search_roles(name))
    logger.debug("Roles searched", pattern=name, count=len(items))
    return items


@router.get(
    "/count",
    status_code=status.HTTP_200_OK,
    response_model=RoleCountResponse,
)
async def count_roles(role_service: RoleServiceDep) -> RoleCountResponse:
    """Count stored roles."""
    return RoleCountResponse(count=await role_service.count_roles())


@router.get(
    "/{role_id}",
    status_code=status.HTTP_200_OK,
    response_model=RoleResponse,
    responses={**INVALID_REQUEST, **NOT_FOUND},
)
async def get_role(role_id: int, role_service: RoleServiceDep) -> RoleResponse:
    """Get a role by ID.

    Args:
        role_id: Role ID.
        role_service: Role service.

    Returns:
        Role details.
    """
    role = await role_service.get_role_by_id(role_id)
    if role is None:
        logger.info("Role not found", role_id=role_id)
        raise RoleNotFoundError.for_id(role_id)
    return to_response(role)


@router.put(
    "/{role_id}",
    status_code=status.HTTP_200_OK,
    response_model=RoleResponse,
    responses={**INVALID_REQUEST, **NOT_FOUND, **CONFLICT},
)
async def update_role(
    role_id: int,
    role_request: UpdateRoleRequest,
    role_service: RoleServiceDep,
) -> RoleResponse:
    """Rename a role.

    Args:
        role_id: Role ID.
        role_request: Role update request.
        role_service: Role service.

    Returns:
        Updated role.
    """
    role = await role_service.rename_role(role_id, role_request.name)
    return to_response(role)


@router.delete(
    "/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=INVALID_REQUEST,
)
async def delete_role(role_id: int, role_service: RoleServiceDep) -> None:
    """Delete a role.

    Deleting an ID that does not exist succeeds. Roles whose name contains
    "SYSTEM" cannot be deleted.

    Args:
        role_id: Role ID.
        role_service: Role service.
    """
    await role_service.delete_role(role_id)
