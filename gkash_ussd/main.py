import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from gkash_ussd.api.routes import api_router
from gkash_ussd.core.config import settings
from gkash_ussd.core.logging_config import setup_logging
from gkash_ussd.domain.services.ussd_dispatcher import UssdDispatcher
from gkash_ussd.infrastructure.cache.session_store import SessionStore
from gkash_ussd.infrastructure.external.gkash_client import GKashClient
from gkash_ussd.infrastructure.external.tiara_connect_client import TiaraConnectClient

logger = logging.getLogger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = SessionStore(
        timeout_seconds=settings.SESSION_TIMEOUT_SECONDS,
        sweep_interval_seconds=settings.SESSION_SWEEP_INTERVAL_SECONDS,
    )
    app.state.session_store = store
    app.state.dispatcher = UssdDispatcher(
        store,
        GKashClient(),
        TiaraConnectClient(),
        cumulative_text=settings.USSD_CUMULATIVE_TEXT,
    )

    store.start()
    logger.info("%s %s started (%s)", settings.APP_NAME, settings.SERVICE_VERSION, settings.ENVIRONMENT)
    try:
        yield
    finally:
        await store.stop()
        logger.info("%s stopped", settings.APP_NAME)


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(title="GKash USSD Service", version=settings.SERVICE_VERSION, lifespan=lifespan)
    app.include_router(api_router)
    return app


app = create_app()
