"""
End-to-end tests for the applicant self-service endpoints.
"""

from datetime import timedelta

import pytest

from universe_api.modules.users.models import UserRole

PERSONAL = {
    "last_name": "Петрова",
    "first_name": "Анна",
    "middle_name": "Сергеевна",
    "gender": "female",
    "consent_personal_data": True,
}


@pytest.fixture
async def abiturient_headers(create_user, login):
    await create_user("a@x.com", phone="+79990000000")
    return await login("a@x.com")


class TestAccess:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [UserRole.ADMIN, UserRole.SPECIALIST])
    async def test_staff_rejected(self, client, create_user, login, role):
        await create_user("staff@ugntu.ru", role)
        headers = await login("staff@ugntu.ru")

        response = await client.get("/api/abiturient/profile", headers=headers)

        assert response.status_code == 403
        assert response.json()["error"] == "INSUFFICIENT_ROLE"

    @pytest.mark.asyncio
    async def test_requires_token(self, client):
        response = await client.get("/api/abiturient/contact")
        assert response.status_code == 401


class TestPersonalData:
    @pytest.mark.asyncio
    async def test_age_fourteen_completes_profile(
        self, client, abiturient_headers, birth_date_for_age
    ):
        body = {**PERSONAL, "birth_date": birth_date_for_age(14).isoformat()}

        response = await client.put(
            "/api/abiturient/profile/personal", json=body, headers=abiturient_headers
        )

        assert response.status_code == 200
        profile = response.json()["data"]["profile"]
        assert profile["is_complete"] is True
        assert profile["last_name"] == "Петрова"
        assert profile["gender"] == "female"
        assert profile["user"]["email"] == "a@x.com"

        fetched = await client.get("/api/abiturient/profile", headers=abiturient_headers)
        assert fetched.json()["data"]["profile"]["is_complete"] is True

    @pytest.mark.asyncio
    async def test_age_thirteen_rejected(self, client, abiturient_headers, birth_date_for_age):
        birth_date = birth_date_for_age(14) + timedelta(days=1)
        body = {**PERSONAL, "birth_date": birth_date.isoformat()}

        response = await client.put(
            "/api/abiturient/profile/personal", json=body, headers=abiturient_headers
        )

        assert response.status_code == 400
        details = response.json()["details"]
        assert details == [{"field": "birth_date", "message": "Minimum age is 14 years"}]

        fetched = await client.get("/api/abiturient/profile", headers=abiturient_headers)
        assert fetched.json()["data"]["profile"]["is_complete"] is False

    @pytest.mark.asyncio
    async def test_consent_required(self, client, abiturient_headers):
        body = {**PERSONAL, "birth_date": "2005-06-15", "consent_personal_data": False}
        response = await client.put(
            "/api/abiturient/profile/personal", json=body, headers=abiturient_headers
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_blank_middle_name_stored_as_null(self, client, abiturient_headers):
        body = {**PERSONAL, "birth_date": "2005-06-15", "middle_name": ""}
        response = await client.put(
            "/api/abiturient/profile/personal", json=body, headers=abiturient_headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["profile"]["middle_name"] is None


class TestContact:
    @pytest.mark.asyncio
    async def test_get_contact(self, client, abiturient_headers):
        response = await client.get("/api/abiturient/contact", headers=abiturient_headers)

        assert response.status_code == 200
        assert response.json()["data"]["contact"] == {
            "email": "a@x.com",
            "phone": "+79990000000",
            "messengers": {},
        }

    @pytest.mark.asyncio
    async def test_update_contact(self, client, abiturient_headers):
        response = await client.put(
            "/api/abiturient/contact",
            json={
                "phone": "+79990000001",
                "messengers": {"telegram": "@anna_petrova", "vkontakte": "id42"},
            },
            headers=abiturient_headers,
        )

        assert response.status_code == 200
        contact = response.json()["data"]["contact"]
        assert contact["phone"] == "+79990000001"
        assert contact["messengers"] == {"telegram": "@anna_petrova", "vkontakte": "id42"}

    @pytest.mark.asyncio
    async def test_messengers_replaced_as_a_whole(self, client, abiturient_headers):
        await client.put(
            "/api/abiturient/contact",
            json={"messengers": {"telegram": "@anna_petrova", "vkontakte": "id42"}},
            headers=abiturient_headers,
        )
        response = await client.put(
            "/api/abiturient/contact",
            json={"messengers": {"max": "+79990000002"}},
            headers=abiturient_headers,
        )

        assert response.json()["data"]["contact"]["messengers"] == {"max": "+79990000002"}

    @pytest.mark.asyncio
    async def test_change_email_then_login_with_it(self, client, abiturient_headers, login):
        response = await client.put(
            "/api/abiturient/contact", json={"email": "new@x.com"}, headers=abiturient_headers
        )
        assert response.status_code == 200
        await login("new@x.com")

    @pytest.mark.asyncio
    async def test_email_taken(self, client, create_user, abiturient_headers):
        await create_user("b@x.com")
        response = await client.put(
            "/api/abiturient/contact", json={"email": "b@x.com"}, headers=abiturient_headers
        )
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_unknown_channel_rejected(self, client, abiturient_headers):
        response = await client.put(
            "/api/abiturient/contact",
            json={"messengers": {"whatsapp": "+79990000002"}},
            headers=abiturient_headers,
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_empty_body_rejected(self, client, abiturient_headers):
        response = await client.put(
            "/api/abiturient/contact", json={}, headers=abiturient_headers
        )
        assert response.status_code == 400
