from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from gkash_ussd.api.deps import get_session_store
from gkash_ussd.core.config import settings
from gkash_ussd.infrastructure.cache.session_store import SessionStore

router = APIRouter()


@router.get("/health")
async def health(store: SessionStore = Depends(get_session_store)):
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "GKash USSD Service",
        "version": settings.SERVICE_VERSION,
        "integrations": {
            "gkash_api": settings.GKASH_API_URL,
            "tiara_connect": "configured" if settings.TIARA_CONNECT_API_KEY else "not configured",
        },
        "environment": settings.ENVIRONMENT,
        "active_sessions": len(store),
    }


@router.get("/")
async def index():
    return {
        "message": "GKash USSD Service",
        "version": settings.SERVICE_VERSION,
        "endpoints": {
            "ussd": "POST /ussd",
            "health": "GET /health",
        },
        "integration": "TiaraConnect USSD Gateway",
    }
