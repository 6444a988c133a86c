"""Shared test fixtures for the GKash USSD test suite."""

import asyncio
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from gkash_ussd.domain.models.gkash import Account, LoginResult, Transaction, User
from gkash_ussd.infrastructure.cache.session_store import SessionStore


@pytest.fixture(scope="session")
def event_loop():
    """Use a single event loop for the entire test session."""
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> SessionStore:
    return SessionStore(timeout_seconds=300, sweep_interval_seconds=60, clock=clock)


FIXED_NOW = datetime(2025, 1, 15, 10, 30, 0)

USER = User(id="user-1", name="Jane Doe", phoneNumber="+254712345678", idNumber="12345678")


def make_account(
    account_id: str = "acc-1",
    account_type: str = "balanced_fund",
    balance: str = "1000",
    account_number: str = "BF00000001",
) -> Account:
    return Account(
        id=account_id,
        userId=USER.id,
        type=account_type,
        balance=Decimal(balance),
        accountNumber=account_number,
    )


def make_transaction(
    tx_type: str = "deposit",
    amount: str = "500",
    balance: str = "1500",
    timestamp: datetime = FIXED_NOW,
    tx_id: str = "tx-1",
    account_id: str = "acc-1",
) -> Transaction:
    return Transaction(
        id=tx_id,
        accountId=account_id,
        type=tx_type,
        amount=Decimal(amount),
        balance=Decimal(balance),
        timestamp=timestamp,
    )


@pytest.fixture
def backend() -> MagicMock:
    """GKash backend stub with one Balanced Fund account holding KES 1000."""
    mock = MagicMock()
    mock.create_user = AsyncMock(return_value=USER)
    mock.create_account = AsyncMock(return_value=make_account(balance="0"))
    mock.login = AsyncMock(return_value=LoginResult(user=USER, token="tok"))
    mock.list_accounts = AsyncMock(return_value=[make_account()])
    mock.get_user_by_phone = AsyncMock(return_value=USER)
    mock.deposit = AsyncMock(return_value=make_transaction())
    mock.withdraw = AsyncMock(return_value=make_transaction("withdraw", "200", "800"))
    mock.transaction_history = AsyncMock(return_value=[make_transaction()])
    return mock


@pytest.fixture
def sms() -> MagicMock:
    mock = MagicMock()
    mock.send_sms = AsyncMock(return_value=True)
    mock.send_account_creation_notification = AsyncMock(return_value=True)
    mock.send_transaction_notification = AsyncMock(return_value=True)
    return mock
