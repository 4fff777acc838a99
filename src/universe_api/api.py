from fastapi import APIRouter

from universe_api.modules.abiturient.router import router as abiturient_router
from universe_api.modules.auth.router import router as auth_router
from universe_api.modules.users.router import router as users_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(users_router, prefix="/users", tags=["Users"])

api_router.include_router(abiturient_router, prefix="/abiturient", tags=["Abiturient"])
