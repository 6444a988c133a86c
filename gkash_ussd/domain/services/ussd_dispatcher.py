# gkash_ussd/domain/services/ussd_dispatcher.py
"""
USSD dialogue dispatcher.

One call per gateway round trip:

    1. Reduce the raw text to this step's input (last ``*`` segment when the
       gateway posts cumulative text).
    2. Serialize on the session id, so a re-delivered request waits for the
       first one instead of racing it.
    3. Load the live session or start a fresh one at WELCOME.
    4. Run the handler for the current state.
    5. Any END reply closes the session.

This is the single error boundary for the dialogue: validation problems
re-prompt with CON and keep the session, everything else is logged, the
session destroyed and the message shown with ``END Error:``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

from gkash_ussd.core.logging_config import mask_phone
from gkash_ussd.domain.errors import SessionError, ValidationError
from gkash_ussd.domain.services.ussd_handlers import HANDLER_TABLE, HandlerContext
from gkash_ussd.domain.ussd_text import con, end, is_end, t
from gkash_ussd.infrastructure.cache.session_lock import SessionLocks
from gkash_ussd.infrastructure.cache.session_store import SessionStore

logger = logging.getLogger("ussd_dispatcher")


def step_input(text: str | None, cumulative: bool = False) -> str:
    """The input for this step: trimmed, and only the last segment in cumulative mode."""
    raw = (text or "").strip()
    if cumulative and raw:
        raw = raw.split("*")[-1].strip()
    return raw


class UssdDispatcher:
    def __init__(
        self,
        store: SessionStore,
        backend: Any,
        sms: Any,
        *,
        cumulative_text: bool = False,
        locks: SessionLocks | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.backend = backend
        self.sms = sms
        self.cumulative_text = cumulative_text
        self.locks = locks or SessionLocks()
        self._clock = clock

    async def handle(self, session_id: str, phone_number: str, text: str | None) -> str:
        step = step_input(text, self.cumulative_text)

        async with self.locks.hold(session_id):
            session = self.store.get(session_id)
            if session is None:
                session = self.store.create(session_id, phone_number)
                logger.info("New USSD session %s from %s", session_id, mask_phone(phone_number))
                # Whatever was typed to open the dialogue, it starts at the welcome screen
                step = ""

            state = session.state
            ctx = HandlerContext(
                session=session,
                store=self.store,
                backend=self.backend,
                sms=self.sms,
                clock=self._clock,
            )

            try:
                handler = HANDLER_TABLE.get(state)
                if handler is None:
                    raise SessionError(f"No handler for state {state!r}")
                response = await handler(ctx, step)
            except SessionError as exc:
                logger.warning("Session %s invalid in state %s: %s", session_id, state, exc)
                self.store.destroy(session_id)
                return end(t("INVALID_SESSION"))
            except ValidationError as exc:
                return con(str(exc))
            except Exception as exc:
                logger.exception("USSD handler error in state %s for session %s", state, session_id)
                self.store.destroy(session_id)
                return end(t("ERROR", message=str(exc)))

            if is_end(response):
                self.store.destroy(session_id)
            return response

    def active_sessions(self) -> int:
        return len(self.store)
