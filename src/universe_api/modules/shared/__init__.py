"""
Shared building blocks used by every module.
"""

from universe_api.modules.shared.models import BaseModel, utcnow
from universe_api.modules.shared.schemas import (
    ApiResponse,
    Email,
    ErrorDetail,
    ErrorResponse,
    Pagination,
    PhoneNumber,
)

__all__ = [
    "BaseModel",
    "utcnow",
    "ApiResponse",
    "Email",
    "ErrorDetail",
    "ErrorResponse",
    "Pagination",
    "PhoneNumber",
]
