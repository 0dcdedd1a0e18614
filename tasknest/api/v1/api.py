from fastapi import APIRouter

from tasknest.api.v1.endpoints import auth
from tasknest.api.v1.endpoints import reminders
from tasknest.api.v1.endpoints import categories
from tasknest.api.v1.endpoints import user
from tasknest.api.v1.endpoints import admin_users
from tasknest.core.config import settings

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(reminders.router, prefix="/reminders", tags=["reminders"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(user.router, prefix="/user", tags=["user"])
api_router.include_router(admin_users.router, prefix="/admin", tags=["admin"])

# Diagnostics that expose stored account fields are development-only
if settings.debug_mode:
    api_router.include_router(user.debug_router, prefix="/user", tags=["debug"])
