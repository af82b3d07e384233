"""Role entity.

The role is the only entity of the domain: a named, timestamped record
whose identifier is assigned by the store on first save.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

# Largest identifier the roles table (BIGINT) can hold
MAX_ROLE_ID = 2**63 - 1


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass(eq=False)
class Role:
    """Role entity.

    Two roles are equal when both ``id`` and ``name`` match; ``created_at``
    does not take part in equality.

    Attributes:
        id: Store-assigned identifier, ``None`` until persisted.
        name: Role name (normalized by the name validator before persisting).
        created_at: Creation timestamp, ``None`` for partially built roles.
    """

    name: str | None = None
    id: int | None = None
    created_at: datetime | None = field(default=None)

    @classmethod
    def new(cls, name: str) -> "Role":
        """Build an unsaved role stamped with the current time."""
        return cls(name=name, created_at=utc_now())

    @property
    def is_persisted(self) -> bool:
        """Whether the store has assigned an identifier."""
        return self.id is not None

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Role):
            return NotImplemented
        return self.id == other.id and self.name == other.name

    def __hash__(self) -> int:
        return hash((self.id, self.name))

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name={self.name!r}, created_at={self.created_at})>"
