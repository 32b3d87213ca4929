"""RBAC Console - role and permission configuration editor."""

__version__ = "0.1.0"
