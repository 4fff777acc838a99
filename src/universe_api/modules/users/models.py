"""
User Models

Database model for accounts: the authenticable identities of the portal.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from universe_api.modules.shared import BaseModel

if TYPE_CHECKING:
    from universe_api.modules.abiturient.models import AbiturientProfile


class UserRole(str, Enum):
    """User roles in the system."""

    ABITURIENT = "abiturient"
    SPECIALIST = "specialist"
    ADMIN = "admin"


class User(BaseModel):
    """
    Account model for authentication and authorization.

    Role-specific data lives in linked models; every abiturient owns
    exactly one AbiturientProfile. Accounts are never hard-deleted,
    deactivation clears is_active instead.
    """

    __tablename__ = "users"

    # Authentication fields
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    phone: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    # Role and permissions
    role: Mapped[UserRole] = mapped_column(
        SAEnum(
            UserRole,
            name="user_role",
            values_callable=lambda roles: [role.value for role in roles],
        ),
        nullable=False,
        default=UserRole.ABITURIENT,
    )

    # Account status
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    last_login: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # Relationships
    profile: Mapped["AbiturientProfile | None"] = relationship(
        "AbiturientProfile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role.value})>"

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
