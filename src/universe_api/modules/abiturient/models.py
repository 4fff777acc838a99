"""
Applicant Profile Models

Personal and contact data owned by an abiturient account. A profile is
created empty together with the account and filled in later by its owner.
"""

import enum
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, Date, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from universe_api.modules.shared import BaseModel

if TYPE_CHECKING:
    from universe_api.modules.users.models import User


class Gender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"


class AbiturientProfile(BaseModel):
    """
    Applicant profile.

    Fields may be blank while the profile is a placeholder; completeness is
    enforced when the owner submits personal data, not by the schema.
    """

    __tablename__ = "abiturient_profiles"

    # One profile per user
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    # Personal data
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    first_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    middle_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[Gender | None] = mapped_column(
        Enum(Gender, name="gender", values_callable=lambda items: [item.value for item in items]),
        nullable=True,
    )

    # Contact channels: {"telegram": "@handle", "vkontakte": "id1", ...}
    messengers: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    consent_personal_data: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    user: Mapped["User"] = relationship(
        "User",
        back_populates="profile",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<AbiturientProfile(id={self.id}, user_id={self.user_id})>"

    @property
    def is_complete(self) -> bool:
        """Whether every field required for an application is filled in."""
        return bool(
            self.last_name
            and self.last_name.strip()
            and self.first_name
            and self.first_name.strip()
            and self.birth_date
            and self.gender
            and self.consent_personal_data is True
        )
