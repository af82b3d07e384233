"""Persistence adapters for RoleHex."""
