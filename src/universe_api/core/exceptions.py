"""
Service Errors

Domain exceptions raised by the gate, the access policy and the services.
Each carries the HTTP status and machine-readable error code it maps to;
the translation to a JSON response lives in core/handlers.py.
"""

from typing import Any

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


class ServiceError(Exception):
    """Base exception for all service errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        status_code: int = 400,
        details: list[dict[str, Any]] | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details
        self.headers = headers
        super().__init__(message)


# ============================================
# 400 - Validation
# ============================================


class ValidationError(ServiceError):
    """Raised when input is rejected before any store mutation."""

    def __init__(
        self,
        message: str = "Validation failed.",
        details: list[dict[str, Any]] | None = None,
        error_code: str = "VALIDATION_ERROR",
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=400,
            details=details,
        )


class CannotDeactivateSelfError(ValidationError):
    """Raised when an admin tries to deactivate their own account."""

    def __init__(self):
        super().__init__(
            message="You cannot deactivate your own account.",
            error_code="CANNOT_DEACTIVATE_SELF",
        )


# ============================================
# 401 - Authentication
# ============================================


class AuthenticationError(ServiceError):
    """Raised when the caller's identity cannot be established."""

    def __init__(self, message: str, error_code: str = "UNAUTHENTICATED"):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=401,
            headers=BEARER_CHALLENGE,
        )


class MissingTokenError(AuthenticationError):
    def __init__(self):
        super().__init__(
            message="No token provided. Use the format: Authorization: Bearer <token>",
            error_code="NO_TOKEN",
        )


class TokenExpiredError(AuthenticationError):
    def __init__(self):
        super().__init__(message="Token has expired.", error_code="TOKEN_EXPIRED")


class InvalidTokenError(AuthenticationError):
    def __init__(self, message: str = "Invalid token."):
        super().__init__(message=message, error_code="INVALID_TOKEN")


class AccountNotFoundError(AuthenticationError):
    """The token is valid but its account no longer exists."""

    def __init__(self):
        super().__init__(message="Account not found.", error_code="ACCOUNT_NOT_FOUND")


class InvalidCredentialsError(AuthenticationError):
    """Unknown email and wrong password share this error on purpose."""

    def __init__(self):
        super().__init__(message="Invalid email or password.", error_code="INVALID_CREDENTIALS")


# ============================================
# 403 - Authorization
# ============================================


class AuthorizationError(ServiceError):
    """Raised when an authenticated caller may not perform the action."""

    def __init__(self, message: str, error_code: str = "FORBIDDEN"):
        super().__init__(message=message, error_code=error_code, status_code=403)


class AccountInactiveError(AuthorizationError):
    def __init__(self):
        super().__init__(
            message="Account is deactivated. Please contact an administrator.",
            error_code="ACCOUNT_INACTIVE",
        )


class InsufficientRoleError(AuthorizationError):
    def __init__(self, required_roles: list[str]):
        super().__init__(
            message=f"Insufficient permissions. Required roles: {', '.join(required_roles)}",
            error_code="INSUFFICIENT_ROLE",
        )


class NotResourceOwnerError(AuthorizationError):
    def __init__(self):
        super().__init__(
            message="Access denied. You can only access your own data.",
            error_code="NOT_RESOURCE_OWNER",
        )


# ============================================
# 404 - Not found
# ============================================


class NotFoundError(ServiceError):
    def __init__(self, message: str = "Resource not found.", error_code: str = "NOT_FOUND"):
        super().__init__(message=message, error_code=error_code, status_code=404)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: int | None = None):
        message = f"User {user_id} not found." if user_id is not None else "User not found."
        super().__init__(message=message, error_code="USER_NOT_FOUND")


class ProfileNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__(message="Applicant profile not found.", error_code="PROFILE_NOT_FOUND")


# ============================================
# 409 - Conflict
# ============================================


class ConflictError(ServiceError):
    def __init__(self, message: str, error_code: str = "CONFLICT"):
        super().__init__(message=message, error_code=error_code, status_code=409)


class EmailAlreadyExistsError(ConflictError):
    def __init__(self, email: str | None = None):
        message = (
            f"A user with email {email} already exists."
            if email
            else "A user with this email already exists."
        )
        super().__init__(message=message, error_code="EMAIL_EXISTS")


# ============================================
# 500 - Internal
# ============================================


class InternalError(ServiceError):
    def __init__(self, message: str = "Internal server error."):
        super().__init__(message=message, error_code="INTERNAL_ERROR", status_code=500)
