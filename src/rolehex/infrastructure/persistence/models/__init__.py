"""SQLAlchemy models for RoleHex.

Importing this package registers every model with ``Base.metadata``.
"""

from rolehex.infrastructure.persistence.models.role import RoleModel

__all__ = ["RoleModel"]
