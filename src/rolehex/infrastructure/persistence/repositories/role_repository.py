"""Role repository for database operations.

SQLAlchemy implementation of the ``RoleStore`` port. Each write commits
its own transaction; a failed write is rolled back before the error is
translated into a domain exception.
"""

from contextlib import aclosing, asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy import delete, exists, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from rolehex.application.ports import RoleStore
from rolehex.core.logging import get_logger, log_execution
from rolehex.domain.entities import Role, utc_now
from rolehex.domain.exceptions import (
    EXPECTED_ROLE_ERRORS,
    DuplicateRoleError,
    PersistenceError,
    RoleNotFoundError,
)
from rolehex.infrastructure.persistence.models import RoleModel
from rolehex.infrastructure.persistence.role_mapper import to_domain, to_model

logger = get_logger(__name__)

traced = log_execution("REPOSITORY", EXPECTED_ROLE_ERRORS)


class RoleRepository(RoleStore):
    """Repository for role database operations."""

    def __init__(self, session: AsyncSession, batch_size: int = 100) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
            batch_size: Rows fetched per round trip when streaming.
        """
        self.session = session
        self.batch_size = batch_size

    @asynccontextmanager
    async def _translate_errors(self, action: str) -> AsyncGenerator[None, None]:
        """Roll back and wrap unclassified driver failures."""
        try:
            yield
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Role store failure", action=action, error=str(e))
            raise PersistenceError(f"Failed to {action}") from e

    @traced
    async def save(self, role: Role) -> Role:
        """Insert or update a role.

        Args:
            role: Role to persist. Inserted when ``id`` is None.

        Returns:
            The persisted role as read back from the database.

        Raises:
            DuplicateRoleError: If the unique name constraint rejects the row.
            RoleNotFoundError: If updating an ID that has no row.
            PersistenceError: On any other database failure.
        """
        async with self._translate_errors("save role"):
            try:
                if role.id is None:
                    model = to_model(role)
                    if model.created_at is None:
                        model.created_at = utc_now()
                    self.session.add(model)
                else:
                    model = await self.session.get(RoleModel, role.id)
                    if model is None:
                        raise RoleNotFoundError.for_id(role.id)
                    model.name = role.name

                await self.session.commit()
            except IntegrityError as e:
                await self.session.rollback()
                logger.info("Role name rejected by unique constraint", role_name=role.name)
                raise DuplicateRoleError.for_name(role.name) from e

            await self.session.refresh(model)

        return to_domain(model)

    @traced
    async def find_by_id(self, role_id: int) -> Role | None:
        """Get a role by ID.

        Args:
            role_id: Role ID.

        Returns:
            Role if found, None otherwise.
        """
        async with self._translate_errors("find role by id"):
            result = await self.session.execute(
                select(RoleModel).where(RoleModel.id == role_id)
            )
            model = result.scalar_one_or_none()
        return to_domain(model) if model is not None else None

    @traced
    async def find_all(self) -> AsyncIterator[Role]:
        """Stream all roles in batches of ``batch_size``."""
        stmt = select(RoleModel).order_by(RoleModel.id)
        async with aclosing(self._stream(stmt, "list roles")) as roles:
            async for role in roles:
                yield role

    @traced
    async def exists_by_name(self, name: str) -> bool:
        """Check if a role with exactly this name exists.

        Args:
            name: Role name, compared case-sensitively.
        """
        async with self._translate_errors("check role name"):
            result = await self.session.execute(
                select(exists().where(RoleModel.name == name))
            )
            return bool(result.scalar())

    @traced
    async def find_by_name_containing(self, pattern: str) -> AsyncIterator[Role]:
        """Stream roles whose name contains ``pattern``, ignoring case.

        ``%`` and ``_`` in the pattern are matched literally.
        """
        stmt = (
            select(RoleModel)
            .where(RoleModel.name.icontains(pattern, autoescape=True))
            .order_by(RoleModel.id)
        )
        async with aclosing(self._stream(stmt, "search roles")) as roles:
            async for role in roles:
                yield role

    @traced
    async def find_by_name(self, name: str) -> Role | None:
        """Get a role by exact name.

        Args:
            name: Role name, compared case-sensitively.

        Returns:
            Role if found, None otherwise.
        """
        async with self._translate_errors("find role by name"):
            result = await self.session.execute(
                select(RoleModel).where(RoleModel.name == name)
            )
            model = result.scalar_one_or_none()
        return to_domain(model) if model is not None else None

    @traced
    async def delete_by_id(self, role_id: int) -> None:
        """Delete a role by ID. Missing IDs are ignored.

        Args:
            role_id: Role ID.
        """
        async with self._translate_errors("delete role"):
            result = await self.session.execute(
                delete(RoleModel).where(RoleModel.id == role_id)
            )
            await self.session.commit()

        if result.rowcount == 0:
            logger.debug("No role deleted, ID not found", role_id=role_id)

    @traced
    async def count(self) -> int:
        """Count all roles."""
        async with self._translate_errors("count roles"):
            result = await self.session.execute(select(func.count()).select_from(RoleModel))
            return result.scalar_one()

    async def _stream(self, stmt, action: str) -> AsyncIterator[Role]:
        async with self._translate_errors(action):
            result = await self.session.stream_scalars(
                stmt.execution_options(yield_per=self.batch_size)
            )
            try:
                async for model in result:
                    yield to_domain(model)
            finally:
                await result.close()
