# gkash_ussd/api/deps.py
"""
Shared FastAPI dependencies.

The dispatcher and session store are built once in the app lifespan and kept
on ``app.state``; routes reach them through these helpers so tests can swap
them with ``app.dependency_overrides``.
"""

from fastapi import Request

from gkash_ussd.domain.services.ussd_dispatcher import UssdDispatcher
from gkash_ussd.infrastructure.cache.session_store import SessionStore


def get_dispatcher(request: Request) -> UssdDispatcher:
    return request.app.state.dispatcher


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store
