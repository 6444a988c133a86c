from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable

from gkash_ussd.domain.models.session import Session, UssdState
from gkash_ussd.domain.services.validation import is_valid_phone, normalize_phone
from gkash_ussd.infrastructure.cache.session_store import SessionStore

DISPLAY_TIME_FORMAT = "%d/%m/%Y %H:%M:%S"
DISPLAY_DATE_FORMAT = "%d/%m/%Y"


@dataclass
class HandlerContext:
    """What a state handler may touch while processing one step."""

    session: Session
    store: SessionStore
    backend: Any
    sms: Any
    clock: Callable[[], datetime] = datetime.now

    @property
    def session_id(self) -> str:
        return self.session.session_id

    def goto(self, state: UssdState) -> None:
        self.store.update(self.session_id, state=state)

    def remember(self, key: str, value: Any) -> None:
        self.store.set_form_field(self.session_id, key, value)

    def recall(self, key: str) -> Any:
        return self.store.get_form_field(self.session_id, key)

    def subscriber_phone(self) -> str:
        """The dialing number in the form the backend registered it."""
        phone = self.session.phone_number
        return normalize_phone(phone) if is_valid_phone(phone) else phone

    def now_text(self) -> str:
        return self.clock().strftime(DISPLAY_TIME_FORMAT)


Handler = Callable[[HandlerContext, str], Awaitable[str]]
