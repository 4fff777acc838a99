"""
Core module - Configuration, database, security, and errors.
"""

from universe_api.core.config import Settings, get_settings
from universe_api.core.database import (
    Base,
    close_db,
    create_engine,
    create_session_maker,
    get_db,
    init_db,
)
from universe_api.core.exceptions import ServiceError
from universe_api.core.security import PasswordHasher, TokenClaims, TokenService

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Database
    "Base",
    "create_engine",
    "create_session_maker",
    "get_db",
    "init_db",
    "close_db",
    # Errors
    "ServiceError",
    # Security
    "PasswordHasher",
    "TokenClaims",
    "TokenService",
]
