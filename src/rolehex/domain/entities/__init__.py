"""Domain entities for RoleHex.

Entities are pure Python dataclasses that represent core business concepts.
"""

from rolehex.domain.entities.role import MAX_ROLE_ID, Role, utc_now

__all__ = ["MAX_ROLE_ID", "Role", "utc_now"]
