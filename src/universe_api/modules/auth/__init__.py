"""Authentication module."""

from universe_api.modules.auth.router import router
from universe_api.modules.auth.schemas import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
)

__all__ = ["router", "AuthResponse", "LoginRequest", "RegisterRequest", "TokenResponse"]
