"""
Abiturient module - the applicant profile owned by every abiturient account.

API Endpoints:
- GET /abiturient/profile - Get own profile
- PUT /abiturient/profile/personal - Submit personal data (completes the profile)
- GET /abiturient/contact - Get contact information
- PUT /abiturient/contact - Update email, phone and messengers
"""

from universe_api.modules.abiturient.models import AbiturientProfile, Gender

__all__ = ["AbiturientProfile", "Gender"]
