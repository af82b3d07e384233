"""Infrastructure adapters for RoleHex.

HTTP and relational-database implementations of the application ports.
"""
