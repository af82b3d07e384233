"""SQLAlchemy model for the roles table."""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from rolehex.infrastructure.persistence.database import Base


class RoleModel(Base):
    """SQLAlchemy model for the roles table.

    The unique constraint on ``name`` is what finally rejects duplicate
    roles when concurrent creates race past the service pre-check.

    Attributes:
        id: Auto-incrementing primary key.
        name: Unique role name (case-sensitive).
        created_at: Timestamp when the role was created.
    """

    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(
        # SQLite only auto-increments INTEGER PRIMARY KEY columns
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Role name (e.g., 'ADMIN', 'USER')",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name={self.name})>"
