"""Pytest configuration for unit tests."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from rolehex.application.ports import RoleStore
from rolehex.application.services import RoleService
from rolehex.domain.entities import Role


def stream_of(*roles: Role):
    """Return a callable producing a fresh async iterator over ``roles``."""

    async def _stream(*_args, **_kwargs):
        for role in roles:
            yield role

    return _stream


@pytest.fixture
def created_at() -> datetime:
    return datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_store() -> MagicMock:
    """A role store whose coroutine methods are AsyncMocks."""
    store = MagicMock(spec=RoleStore)
    store.save = AsyncMock(side_effect=lambda role: Role(id=1, name=role.name, created_at=role.created_at))
    store.find_by_id = AsyncMock(return_value=None)
    store.exists_by_name = AsyncMock(return_value=False)
    store.find_by_name = AsyncMock(return_value=None)
    store.delete_by_id = AsyncMock(return_value=None)
    store.count = AsyncMock(return_value=0)
    store.find_all = MagicMock(side_effect=stream_of())
    store.find_by_name_containing = MagicMock(side_effect=stream_of())
    return store


@pytest.fixture
def role_service(mock_store: MagicMock) -> RoleService:
    return RoleService(mock_store)
