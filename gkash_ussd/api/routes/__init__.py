from fastapi import APIRouter

from gkash_ussd.api.routes.health import router as health_router
from gkash_ussd.api.routes.ussd import router as ussd_router

api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(ussd_router, tags=["ussd"])
