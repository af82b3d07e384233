"""Application layer for RoleHex.

Ports describe what the application needs from the outside world;
services orchestrate domain rules around those ports.
"""
