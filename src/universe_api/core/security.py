"""
Security Utilities

Password hashing (bcrypt) and signed bearer tokens (JWT).

Both services are constructed from Settings by the application factory
and handed to the code that needs them; nothing here reads configuration
on its own.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from universe_api.core.exceptions import InvalidTokenError, TokenExpiredError

logger = logging.getLogger(__name__)

# bcrypt only considers the first 72 bytes of a secret
MAX_PASSWORD_BYTES = 72

REQUIRED_CLAIMS = ["id", "email", "role", "iat", "exp"]


class PasswordHasher:
    """One-way salted hashing of account secrets."""

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a secret against a stored digest. Never raises on mismatch."""
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            return False


@dataclass(frozen=True)
class TokenClaims:
    """Identity claims carried by an access token."""

    id: int
    email: str
    role: str
    phone: str | None = None

    @classmethod
    def from_account(cls, account: Any) -> "TokenClaims":
        role = account.role.value if hasattr(account.role, "value") else str(account.role)
        return cls(id=account.id, email=account.email, role=role, phone=account.phone)

    def to_payload(self) -> dict[str, Any]:
        return {"id": self.id, "email": self.email, "role": self.role, "phone": self.phone}


class TokenService:
    """Issues and verifies signed, time-limited bearer tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(days=7)):
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    @property
    def ttl_seconds(self) -> int:
        return int(self.ttl.total_seconds())

    def issue(self, claims: TokenClaims, ttl: timedelta | None = None) -> str:
        """
        Create a signed token for the given claims.

        Args:
            claims: Identity claims to embed
            ttl: Lifetime override (defaults to the configured TTL)

        Returns:
            Encoded JWT string
        """
        now = datetime.now(UTC)
        payload = claims.to_payload()
        payload.update(
            {
                "iat": now,
                "exp": now + (ttl if ttl is not None else self.ttl),
                "jti": uuid.uuid4().hex,
            }
        )
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry and return the embedded claims.

        Raises:
            TokenExpiredError: The token is past its expiry time
            InvalidTokenError: Bad signature, malformed token or missing claims
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError() from e
        except jwt.InvalidTokenError as e:
            logger.debug(f"Token rejected: {e}")
            raise InvalidTokenError() from e

        try:
            return TokenClaims(
                id=int(payload["id"]),
                email=str(payload["email"]),
                role=str(payload["role"]),
                phone=payload.get("phone"),
            )
        except (TypeError, ValueError) as e:
            raise InvalidTokenError("Token contains invalid claims.") from e
