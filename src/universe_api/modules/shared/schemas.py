"""
Field types and response envelopes shared by all endpoints.

Every response body carries a ``success`` flag.
"""

import re
from typing import Annotated, Generic, TypeVar

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel

DataT = TypeVar("DataT")

PHONE_PATTERN = re.compile(r"^\+7\d{10}$")


def _check_phone(value: str) -> str:
    if not PHONE_PATTERN.match(value):
        raise ValueError("Phone must be in the format +7XXXXXXXXXX")
    return value


PhoneNumber = Annotated[str, AfterValidator(_check_phone)]


def _check_email(value: str) -> str:
    """Validate the address syntax but keep it exactly as typed."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(str(e)) from e
    return value


# Emails are matched case-sensitively, so no normalization is applied.
Email = Annotated[str, AfterValidator(_check_email)]


class ApiResponse(BaseModel, Generic[DataT]):
    """Successful response envelope."""

    success: bool = True
    message: str | None = None
    data: DataT | None = None


class ErrorDetail(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    """Error response envelope."""

    success: bool = False
    error: str
    message: str
    details: list[ErrorDetail] | str | None = None


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    pages: int
