"""FastAPI dependencies wiring adapters to the application services.

A fresh repository and service are built for every request on top of the
request's database session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rolehex.application.ports import RoleStore
from rolehex.application.services import RoleService
from rolehex.infrastructure.persistence.database import get_db_session
from rolehex.infrastructure.persistence.repositories import RoleRepository


def get_role_store(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> RoleStore:
    """Build the role store for the current request."""
    return RoleRepository(session)


def get_role_service(
    store: Annotated[RoleStore, Depends(get_role_store)],
) -> RoleService:
    """Build the role service for the current request."""
    return RoleService(store)


RoleServiceDep = Annotated[RoleService, Depends(get_role_service)]
