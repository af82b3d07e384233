"""Domain layer for RoleHex.

Holds the role entity, its exceptions and the pure validation rules.
Nothing here depends on infrastructure or external frameworks.
"""
