"""
Users module - accounts, roles and admin account management.
"""

from universe_api.modules.users.models import User, UserRole

__all__ = ["User", "UserRole"]
