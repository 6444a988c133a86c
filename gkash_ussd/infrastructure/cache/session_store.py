# gkash_ussd/infrastructure/cache/session_store.py
"""
In-process USSD session store.

Sessions live only as long as the dialogue does: an idle session is invisible
to ``get`` as soon as it passes the timeout, and the background sweep removes
it within one sweep interval.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

from gkash_ussd.domain.models.session import Session, UssdState

logger = logging.getLogger("session_store")

# ---------------------------------------------------------------------------
# TTL constants
# ---------------------------------------------------------------------------
SESSION_TIMEOUT_SECONDS = 5 * 60
SWEEP_INTERVAL_SECONDS = 60

_UPDATABLE_FIELDS = {"state", "last_activity"}


class SessionStore:
    def __init__(
        self,
        timeout_seconds: float = SESSION_TIMEOUT_SECONDS,
        sweep_interval_seconds: float = SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.timeout_seconds = timeout_seconds
        self.sweep_interval_seconds = sweep_interval_seconds
        self._clock = clock
        # Held only around dict operations, never across I/O
        self._lock = threading.RLock()
        self._sessions: Dict[str, Session] = {}
        self._sweep_task: asyncio.Task | None = None

    def _is_active(self, session: Session, now: float) -> bool:
        return (now - session.last_activity) < self.timeout_seconds

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def get(self, session_id: str) -> Optional[Session]:
        """Return the live session and refresh its activity, else None."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            now = self._clock()
            if not self._is_active(session, now):
                self._sessions.pop(session_id, None)
                return None
            session.last_activity = now
            return session

    def create(self, session_id: str, phone_number: str) -> Session:
        session = Session(
            session_id=session_id,
            phone_number=phone_number,
            state=UssdState.WELCOME,
            last_activity=self._clock(),
        )
        with self._lock:
            self._sessions[session_id] = session
        return session

    def update(self, session_id: str, **updates: Any) -> None:
        unknown = set(updates) - _UPDATABLE_FIELDS
        if unknown:
            raise TypeError(f"Cannot update session fields: {sorted(unknown)}")
        if "state" in updates:
            # Raises ValueError for anything outside the closed state set
            updates["state"] = UssdState(updates["state"])

        with self._lock:
            session = self.get(session_id)
            if session is None:
                return
            for key, value in updates.items():
                setattr(session, key, value)
            session.last_activity = self._clock()

    def set_form_field(self, session_id: str, key: str, value: Any) -> None:
        with self._lock:
            session = self.get(session_id)
            if session is not None:
                session.form.set(key, value)

    def get_form_field(self, session_id: str, key: str) -> Any:
        with self._lock:
            session = self.get(session_id)
            if session is None:
                return None
            return session.form.get(key)

    def destroy(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    # ------------------------------------------------------------------
    # Sweep
    # ------------------------------------------------------------------

    def sweep(self) -> int:
        """Drop every session idle past the timeout. Returns how many went."""
        with self._lock:
            now = self._clock()
            expired = [
                sid for sid, session in self._sessions.items()
                if not self._is_active(session, now)
            ]
            for sid in expired:
                del self._sessions[sid]

        if expired:
            logger.info("Session sweep removed %d idle session(s)", len(expired))
        return len(expired)

    async def _sweep_loop(self) -> None:
        logger.info("Session sweep started (interval=%ss)", self.sweep_interval_seconds)
        while True:
            await asyncio.sleep(self.sweep_interval_seconds)
            try:
                self.sweep()
            except Exception:
                logger.exception("Session sweep error")

    def start(self) -> None:
        """Start the background sweep. Safe to call more than once."""
        if self._sweep_task is not None and not self._sweep_task.done():
            logger.debug("Session sweep already running")
            return
        self._sweep_task = asyncio.create_task(self._sweep_loop())

    async def stop(self) -> None:
        """Cancel the background sweep and wait for it to finish."""
        task, self._sweep_task = self._sweep_task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Session sweep stopped")

    @property
    def running(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()
