# gkash_ussd/domain/models/session.py

from __future__ import annotations

from dataclasses import dataclass, field, fields
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from gkash_ussd.domain.errors import SessionError


class UssdState(str, Enum):
    WELCOME = "WELCOME"

    # Account creation
    CREATE_NAME = "CREATE_NAME"
    CREATE_PHONE = "CREATE_PHONE"
    CREATE_ID = "CREATE_ID"
    CREATE_PIN = "CREATE_PIN"
    SELECT_ACCOUNT_TYPE = "SELECT_ACCOUNT_TYPE"

    MAIN_MENU = "MAIN_MENU"

    # Operations
    WITHDRAW_AMOUNT = "WITHDRAW_AMOUNT"
    WITHDRAW_PIN = "WITHDRAW_PIN"
    DEPOSIT_AMOUNT = "DEPOSIT_AMOUNT"
    DEPOSIT_PIN = "DEPOSIT_PIN"
    BALANCE_PIN = "BALANCE_PIN"

    # Account tracking
    TRACK_ACCOUNTS = "TRACK_ACCOUNTS"
    TRANSACTION_HISTORY = "TRANSACTION_HISTORY"


@dataclass(frozen=True)
class Registration:
    """Everything the backend needs to open a user, collected over four steps."""

    name: str
    phone_number: str
    id_number: str
    pin: str


@dataclass
class FormData:
    """Per-session accumulator for multi-step flows.

    Creation fills ``name`` → ``phone_number`` → ``id_number`` → ``pin``;
    deposit/withdrawal fill ``amount``; account tracking remembers the
    listed ``account_ids`` so a numbered choice can be resolved later.
    """

    name: Optional[str] = None
    phone_number: Optional[str] = None
    id_number: Optional[str] = None
    pin: Optional[str] = None
    amount: Optional[Decimal] = None
    user_id: Optional[str] = None
    account_ids: list[str] = field(default_factory=list)

    def set(self, key: str, value: Any) -> None:
        if key not in _FORM_FIELDS:
            raise KeyError(f"Unknown form field: {key}")
        setattr(self, key, value)

    def get(self, key: str) -> Any:
        if key not in _FORM_FIELDS:
            raise KeyError(f"Unknown form field: {key}")
        return getattr(self, key)

    def registration(self) -> Registration:
        if not (self.name and self.phone_number and self.id_number and self.pin):
            raise SessionError("Incomplete registration details")
        return Registration(
            name=self.name,
            phone_number=self.phone_number,
            id_number=self.id_number,
            pin=self.pin,
        )


_FORM_FIELDS = frozenset(f.name for f in fields(FormData))


@dataclass
class Session:
    session_id: str
    phone_number: str
    state: UssdState = UssdState.WELCOME
    form: FormData = field(default_factory=FormData)
    last_activity: float = 0.0
