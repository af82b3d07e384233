"""HTTP adapter for RoleHex built on FastAPI."""
