"""RoleHex - role management service.

A small CRUD service for named roles, laid out as a domain core
surrounded by HTTP and persistence adapters.
"""

__version__ = "0.1.0"
