"""
Seed Test Data

Creates demo accounts for local development: an admin, a specialist,
three abiturients with completed profiles and one deactivated abiturient.
Does nothing if the users table already has rows.

Usage:
    python scripts/seed_test_data.py
"""

import asyncio
import sys
from datetime import date
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import func, select

from universe_api.core.config import get_settings
from universe_api.core.database import close_db, create_engine, create_session_maker
from universe_api.core.security import PasswordHasher
from universe_api.modules.abiturient import repository as profile_repository
from universe_api.modules.abiturient.models import Gender
from universe_api.modules.users.models import User, UserRole
from universe_api.modules.users.repository import UserRepository

STAFF = [
    ("admin@ugntu.ru", "+79111111111", "admin123", UserRole.ADMIN),
    ("specialist@ugntu.ru", "+79222222222", "specialist123", UserRole.SPECIALIST),
]

ABITURIENTS = [
    {
        "email": "abiturient1@example.com",
        "phone": "+79333333333",
        "password": "password123",
        "is_active": True,
        "profile": {
            "last_name": "Иванов",
            "first_name": "Иван",
            "middle_name": "Иванович",
            "birth_date": date(2005, 6, 15),
            "gender": Gender.MALE,
            "messengers": {
                "telegram": "@ivanov",
                "vkontakte": "id123456789",
                "max": "+79333333333",
            },
        },
    },
    {
        "email": "abiturient2@example.com",
        "phone": "+79444444444",
        "password": "password456",
        "is_active": True,
        "profile": {
            "last_name": "Петрова",
            "first_name": "Анна",
            "middle_name": "Сергеевна",
            "birth_date": date(2006, 3, 22),
            "gender": Gender.FEMALE,
            "messengers": {
                "telegram": "@anna_petrova",
                "vkontakte": "anna_petrova",
                "max": "+79444444444",
            },
        },
    },
    {
        "email": "abiturient3@example.com",
        "phone": "+79555555555",
        "password": "password789",
        "is_active": True,
        "profile": {
            "last_name": "Сидоров",
            "first_name": "Алексей",
            "middle_name": None,
            "birth_date": date(2005, 11, 30),
            "gender": Gender.MALE,
            "messengers": {
                "telegram": "@alex_sidorov",
                "vkontakte": "id987654321",
                "other": "Skype: alex.sidorov",
            },
        },
    },
    {
        "email": "inactive@example.com",
        "phone": "+79666666666",
        "password": "inactive123",
        "is_active": False,
        "profile": {
            "last_name": "Неактивный",
            "first_name": "Пользователь",
            "middle_name": None,
            "birth_date": date(2004, 8, 10),
            "gender": Gender.MALE,
            "messengers": {},
        },
    },
]


async def seed_test_data(session_maker, hasher: PasswordHasher) -> None:
    """Create the demo accounts if the users table is empty."""
    async with session_maker() as db:
        count = (await db.execute(select(func.count()).select_from(User))).scalar()
        if count:
            print(f"Database already has {count} users, skipping test data")
            return

        for email, phone, password, role in STAFF:
            user = await UserRepository.create(
                db, email=email, phone=phone, password_hash=hasher.hash(password), role=role
            )
            print(f"  {role.value}: {user.email} / {password}")

        for data in ABITURIENTS:
            user = await UserRepository.create(
                db,
                email=data["email"],
                phone=data["phone"],
                password_hash=hasher.hash(data["password"]),
                role=UserRole.ABITURIENT,
                is_active=data["is_active"],
            )
            profile = await profile_repository.get_by_user_id(db, user.id)
            await profile_repository.update(
                db, profile, consent_personal_data=True, **data["profile"]
            )
            status = "" if data["is_active"] else " (inactive)"
            print(f"  abiturient: {user.email} / {data['password']}{status}")

        await db.commit()

    print("Test data created successfully!")


async def main() -> None:
    settings = get_settings()
    engine = create_engine(settings)
    try:
        await seed_test_data(
            create_session_maker(engine), PasswordHasher(rounds=settings.bcrypt_rounds)
        )
    finally:
        await close_db(engine)


if __name__ == "__main__":
    asyncio.run(main())
