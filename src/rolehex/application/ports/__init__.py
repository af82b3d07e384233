"""Ports implemented by infrastructure adapters."""

from rolehex.application.ports.role_store import RoleStore

__all__ = ["RoleStore"]
