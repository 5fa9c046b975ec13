from fastapi import APIRouter
from quickfix.api.v1.endpoints import premium, admin, notifications, public


api_router = APIRouter()

api_router.include_router(premium.router, prefix="/premium", tags=["premium"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
api_router.include_router(public.router, tags=["public"])
