"""Conversions between the role entity and its SQLAlchemy model."""

from datetime import timezone

from rolehex.domain.entities import Role
from rolehex.infrastructure.persistence.models import RoleModel


def to_domain(model: RoleModel) -> Role:
    """Build a role entity from a database row.

    SQLite drops timezone information, so naive timestamps read back are
    taken to be UTC.
    """
    created_at = model.created_at
    if created_at is not None and created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return Role(id=model.id, name=model.name, created_at=created_at)


def to_model(role: Role) -> RoleModel:
    """Build a new database row from a role entity."""
    return RoleModel(id=role.id, name=role.name, created_at=role.created_at)
