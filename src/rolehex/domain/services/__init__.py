"""Domain services for RoleHex.

Services hold business rules that don't belong to a single entity.
They have no dependencies on infrastructure or external frameworks.
"""

from rolehex.domain.services.name_validator import NameValidator

__all__ = ["NameValidator"]
