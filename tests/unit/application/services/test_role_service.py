"""Unit tests for RoleService.

The store is mocked; these tests cover validation, the duplicate pre-check,
deletion rules and the role state helpers.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from rolehex.domain.entities import Role
from rolehex.domain.exceptions import (
    DuplicateRoleError,
    InvalidArgumentError,
    NameViolation,
    NullRoleError,
    PersistenceError,
    RoleNameValidationError,
    RoleNotFoundError,
    RoleValidationError,
    SystemRoleProtectedError,
)


def _stream(*roles):
    async def gen(*_args, **_kwargs):
        for role in roles:
            yield role

    return MagicMock(side_effect=gen)


async def _collect(stream):
    return [item async for item in stream]


class TestCreate:
    """Test role creation."""

    @pytest.mark.asyncio
    async def test_create_normalizes_and_saves(self, role_service, mock_store):
        role = await role_service.create("  ADMIN  ")

        assert role.id == 1
        assert role.name == "ADMIN"
        assert role.created_at is not None
        mock_store.exists_by_name.assert_awaited_once_with("ADMIN")
        saved = mock_store.save.await_args.args[0]
        assert saved.id is None
        assert saved.name == "ADMIN"

    @pytest.mark.asyncio
    async def test_collapses_inner_whitespace(self, role_service, mock_store):
        role = await role_service.create("Content    Editor")

        assert role.name == "Content Editor"
        mock_store.exists_by_name.assert_awaited_once_with("Content Editor")

    @pytest.mark.asyncio
    async def test_duplicate_name_never_reaches_save(self, role_service, mock_store):
        mock_store.exists_by_name.return_value = True

        with pytest.raises(DuplicateRoleError) as exc_info:
            await role_service.create("ADMIN")

        assert "ADMIN" in exc_info.value.message
        mock_store.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_name_never_reaches_store(self, role_service, mock_store):
        with pytest.raises(RoleNameValidationError) as exc_info:
            await role_service.create("SYS_ADMIN")

        assert exc_info.value.violation == NameViolation.RESERVED_PREFIX
        mock_store.exists_by_name.assert_not_awaited()
        mock_store.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_duplicate_on_save_propagates(self, role_service, mock_store):
        mock_store.save.side_effect = DuplicateRoleError.for_name("ADMIN")

        with pytest.raises(DuplicateRoleError):
            await role_service.create("ADMIN")

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, role_service, mock_store):
        mock_store.save.side_effect = PersistenceError("Failed to save role")

        with pytest.raises(PersistenceError):
            await role_service.create("ADMIN")


class TestUpdate:
    """Test in-memory renaming."""

    def test_update_keeps_identity_and_timestamp(self, role_service, created_at):
        role = Role(id=5, name="OLD", created_at=created_at)

        updated = role_service.update(role, "  New   Name ")

        assert updated is role
        assert role.id == 5
        assert role.name == "New Name"
        assert role.created_at == created_at

    def test_update_none_role(self, role_service):
        with pytest.raises(NullRoleError) as exc_info:
            role_service.update(None, "NAME")
        assert exc_info.value.message == "Existing role cannot be null"

    def test_update_invalid_name(self, role_service, created_at):
        role = Role(id=5, name="OLD", created_at=created_at)

        with pytest.raises(RoleNameValidationError):
            role_service.update(role, "x")

    def test_update_role_without_timestamp_is_not_active(self, role_service):
        with pytest.raises(RoleValidationError) as exc_info:
            role_service.update(Role(id=5, name="OLD"), "NEW")
        assert exc_info.value.message == "Role must be in an active state"


class TestRenameRole:
    """Test persisted renaming."""

    @pytest.mark.asyncio
    async def test_rename_saves_new_name(self, role_service, mock_store, created_at):
        mock_store.find_by_id.return_value = Role(id=1, name="OLD", created_at=created_at)

        role = await role_service.rename_role(1, "NEW")

        assert role.name == "NEW"
        mock_store.exists_by_name.assert_awaited_once_with("NEW")
        assert mock_store.save.await_args.args[0].id == 1

    @pytest.mark.asyncio
    async def test_rename_to_same_name_skips_duplicate_check(
        self, role_service, mock_store, created_at
    ):
        mock_store.find_by_id.return_value = Role(id=1, name="SAME", created_at=created_at)

        await role_service.rename_role(1, " SAME ")

        mock_store.exists_by_name.assert_not_awaited()
        mock_store.save.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_rename_to_taken_name(self, role_service, mock_store, created_at):
        mock_store.find_by_id.return_value = Role(id=1, name="OLD", created_at=created_at)
        mock_store.exists_by_name.return_value = True

        with pytest.raises(DuplicateRoleError):
            await role_service.rename_role(1, "TAKEN")
        mock_store.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rename_missing_role(self, role_service, mock_store):
        with pytest.raises(RoleNotFoundError) as exc_info:
            await role_service.rename_role(42, "NEW")
        assert "42" in exc_info.value.message


class TestDeletion:
    """Test deletion rules."""

    def test_validate_for_deletion_none(self, role_service):
        with pytest.raises(NullRoleError):
            role_service.validate_for_deletion(None)

    @pytest.mark.parametrize("name", ["SYSTEM", "my_system_role", "SystemAdmin"])
    def test_system_roles_are_protected(self, role_service, created_at, name):
        with pytest.raises(SystemRoleProtectedError):
            role_service.validate_for_deletion(Role(id=1, name=name, created_at=created_at))

    def test_regular_role_may_be_deleted(self, role_service, created_at):
        role_service.validate_for_deletion(Role(id=1, name="EDITOR", created_at=created_at))

    @pytest.mark.asyncio
    async def test_delete_existing_role(self, role_service, mock_store, created_at):
        mock_store.find_by_id.return_value = Role(id=3, name="EDITOR", created_at=created_at)

        await role_service.delete_role(3)

        mock_store.delete_by_id.assert_awaited_once_with(3)

    @pytest.mark.asyncio
    async def test_delete_missing_role_is_a_no_op(self, role_service, mock_store):
        await role_service.delete_role(3)

        mock_store.delete_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_system_role_is_rejected(self, role_service, mock_store, created_at):
        mock_store.find_by_id.return_value = Role(id=3, name="SYSTEM_ADMIN", created_at=created_at)

        with pytest.raises(SystemRoleProtectedError):
            await role_service.delete_role(3)
        mock_store.delete_by_id.assert_not_awaited()


class TestQueries:
    """Test lookups, listing and search."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role_id", [None, 0, -1, 2**63, 10**23])
    async def test_get_role_by_invalid_id(self, role_service, mock_store, role_id):
        with pytest.raises(InvalidArgumentError):
            await role_service.get_role_by_id(role_id)
        mock_store.find_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_role_by_id_missing(self, role_service, mock_store):
        assert await role_service.get_role_by_id(9) is None
        mock_store.find_by_id.assert_awaited_once_with(9)

    @pytest.mark.asyncio
    async def test_list_roles_streams_store_order(self, role_service, mock_store, created_at):
        roles = [Role(id=i, name=f"R{i}", created_at=created_at) for i in (1, 2, 3)]
        mock_store.find_all = _stream(*roles)

        assert await _collect(role_service.list_roles()) == roles

    @pytest.mark.asyncio
    async def test_list_roles_empty(self, role_service):
        assert await _collect(role_service.list_roles()) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("pattern", [None, "", "   "])
    async def test_search_blank_pattern(self, role_service, mock_store, pattern):
        with pytest.raises(InvalidArgumentError):
            await _collect(role_service.search_roles(pattern))
        mock_store.find_by_name_containing.assert_not_called()

    @pytest.mark.asyncio
    async def test_search_passes_trimmed_pattern(self, role_service, mock_store, created_at):
        admin = Role(id=1, name="ADMIN", created_at=created_at)
        mock_store.find_by_name_containing = _stream(admin)

        assert await _collect(role_service.search_roles("  adm ")) == [admin]
        mock_store.find_by_name_containing.assert_called_once_with("adm")

    @pytest.mark.asyncio
    async def test_count_roles(self, role_service, mock_store):
        mock_store.count.return_value = 4
        assert await role_service.count_roles() == 4


class TestRoleState:
    """Test the active-state helpers."""

    def test_is_active(self, role_service, created_at):
        assert role_service.is_active(Role(id=1, name="ADMIN", created_at=created_at)) is True

    @pytest.mark.parametrize(
        "role",
        [
            None,
            Role(id=1, name=None, created_at=datetime(2024, 1, 1, tzinfo=timezone.utc)),
            Role(id=1, name="   ", created_at=datetime(2024, 1, 1, tzinfo=timezone.utc)),
            Role(id=1, name="ADMIN", created_at=None),
        ],
    )
    def test_is_not_active(self, role_service, role):
        assert role_service.is_active(role) is False

    def test_filter_active_keeps_order(self, role_service, created_at):
        first = Role(id=1, name="A1", created_at=created_at)
        second = Role(id=2, name="B2", created_at=created_at)
        roles = [first, Role(id=9, name="BROKEN"), second, None]

        assert list(role_service.filter_active(roles)) == [first, second]

    def test_filter_active_empty(self, role_service):
        assert list(role_service.filter_active([])) == []
