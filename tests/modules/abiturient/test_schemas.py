"""
Tests for applicant profile request validation.
"""

from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from universe_api.modules.abiturient.models import Gender
from universe_api.modules.abiturient.schemas import (
    ContactUpdate,
    Messengers,
    PersonalDataUpdate,
    calculate_age,
)


def personal_data(**overrides):
    data = {
        "last_name": "Иванов",
        "first_name": "Иван",
        "middle_name": "Иванович",
        "birth_date": date(2005, 6, 15),
        "gender": "male",
        "consent_personal_data": True,
    }
    data.update(overrides)
    return data


class TestCalculateAge:
    def test_birthday_already_passed(self):
        assert calculate_age(date(2005, 6, 15), today=date(2025, 7, 1)) == 20

    def test_birthday_not_yet_reached(self):
        assert calculate_age(date(2005, 6, 15), today=date(2025, 6, 14)) == 19

    def test_on_birthday(self):
        assert calculate_age(date(2005, 6, 15), today=date(2025, 6, 15)) == 20


class TestPersonalDataUpdate:
    def test_valid(self):
        data = PersonalDataUpdate(**personal_data())
        assert data.gender == Gender.MALE

    def test_middle_name_optional(self):
        assert PersonalDataUpdate(**personal_data(middle_name=None)).middle_name is None

    def test_exactly_fourteen_accepted(self, birth_date_for_age):
        PersonalDataUpdate(**personal_data(birth_date=birth_date_for_age(14)))

    def test_thirteen_rejected(self, birth_date_for_age):
        birth_date = birth_date_for_age(14) + timedelta(days=1)
        with pytest.raises(ValidationError, match="Minimum age is 14 years"):
            PersonalDataUpdate(**personal_data(birth_date=birth_date))

    def test_future_birth_date_rejected(self):
        with pytest.raises(ValidationError, match="cannot be in the future"):
            PersonalDataUpdate(
                **personal_data(birth_date=date.today() + timedelta(days=1))
            )

    def test_consent_required(self):
        with pytest.raises(ValidationError, match="Consent"):
            PersonalDataUpdate(**personal_data(consent_personal_data=False))

    @pytest.mark.parametrize("field", ["last_name", "first_name"])
    def test_blank_names_rejected(self, field):
        with pytest.raises(ValidationError):
            PersonalDataUpdate(**personal_data(**{field: "   "}))

    def test_name_too_long(self):
        with pytest.raises(ValidationError):
            PersonalDataUpdate(**personal_data(last_name="a" * 101))

    def test_unknown_gender(self):
        with pytest.raises(ValidationError):
            PersonalDataUpdate(**personal_data(gender="other"))

    def test_missing_fields(self):
        with pytest.raises(ValidationError):
            PersonalDataUpdate(last_name="Иванов")


class TestMessengers:
    def test_valid_handles(self):
        messengers = Messengers(
            telegram="@ivanov",
            vkontakte="id123456789",
            max="+79333333333",
            other="Skype: ivanov",
        )
        assert messengers.model_dump(exclude_none=True) == {
            "telegram": "@ivanov",
            "vkontakte": "id123456789",
            "max": "+79333333333",
            "other": "Skype: ivanov",
        }

    @pytest.mark.parametrize(
        "field,value",
        [
            ("telegram", "ivanov"),
            ("telegram", "@abc"),
            ("vkontakte", "a"),
            ("max", "89333333333"),
            ("other", "x" * 101),
        ],
    )
    def test_invalid_handles(self, field, value):
        with pytest.raises(ValidationError):
            Messengers(**{field: value})

    def test_unknown_channel_rejected(self):
        with pytest.raises(ValidationError):
            Messengers(whatsapp="+79333333333")


class TestContactUpdate:
    def test_requires_a_field(self):
        with pytest.raises(ValidationError, match="At least one"):
            ContactUpdate()

    def test_phone_only(self):
        assert ContactUpdate(phone="+79990000001").phone == "+79990000001"

    def test_invalid_phone(self):
        with pytest.raises(ValidationError, match=r"\+7XXXXXXXXXX"):
            ContactUpdate(phone="89990000001")

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            ContactUpdate(email="not-an-email")

    def test_email_keeps_original_case(self):
        assert ContactUpdate(email="Anna@UGNTU.ru").email == "Anna@UGNTU.ru"
