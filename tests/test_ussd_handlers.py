"""Tests for individual state handlers (domain/services/ussd_handlers/)."""

from datetime import timedelta
from decimal import Decimal
from unittest.mock import AsyncMock

from conftest import FIXED_NOW, make_account, make_transaction
from gkash_ussd.domain.models.session import UssdState
from gkash_ussd.domain.services.ussd_handlers import HANDLER_TABLE, HandlerContext
from gkash_ussd.domain.services.ussd_handlers import account_tracking, main_menu, transactions

SESSION = "s1"
PHONE = "+254712345678"


def _ctx(store, backend, sms, state):
    session = store.create(SESSION, PHONE)
    store.update(SESSION, state=state)
    return HandlerContext(session=session, store=store, backend=backend, sms=sms, clock=lambda: FIXED_NOW)


# ── Handler table ───────────────────────────────────────────────────


def test_every_state_has_exactly_one_handler():
    assert set(HANDLER_TABLE) == set(UssdState)
    assert len(UssdState) == 14


def test_table_points_at_module_handlers():
    assert HANDLER_TABLE[UssdState.WELCOME] is main_menu.handle_welcome
    assert HANDLER_TABLE[UssdState.DEPOSIT_PIN] is transactions.handle_deposit_pin
    assert HANDLER_TABLE[UssdState.TRANSACTION_HISTORY] is account_tracking.handle_transaction_history


# ── Amount entry ────────────────────────────────────────────────────


def test_amount_is_stored_as_decimal(event_loop, store, backend, sms):
    ctx = _ctx(store, backend, sms, UssdState.WITHDRAW_AMOUNT)

    reply = event_loop.run_until_complete(transactions.handle_withdraw_amount(ctx, "99.50"))

    assert reply == "CON Confirm withdrawal of KES 99.50\nEnter your PIN:"
    assert store.get_form_field(SESSION, "amount") == Decimal("99.50")
    assert store.get(SESSION).state == UssdState.WITHDRAW_PIN


def test_zero_amount_is_rejected(event_loop, store, backend, sms):
    ctx = _ctx(store, backend, sms, UssdState.WITHDRAW_AMOUNT)

    reply = event_loop.run_until_complete(transactions.handle_withdraw_amount(ctx, "0"))

    assert reply == "CON Invalid amount. Enter amount to withdraw:"
    assert store.get(SESSION).state == UssdState.WITHDRAW_AMOUNT


# ── Account tracking ────────────────────────────────────────────────


def test_track_accounts_lists_accounts(event_loop, store, backend, sms):
    backend.list_accounts = AsyncMock(
        return_value=[make_account(), make_account("acc-2", "stock_market", "20000", "SM00000002")]
    )
    ctx = _ctx(store, backend, sms, UssdState.TRACK_ACCOUNTS)

    reply = event_loop.run_until_complete(account_tracking.handle_track_accounts(ctx, "5678"))

    assert reply == (
        "CON Your Accounts:\n"
        "1. Balanced Fund - KES 1000\n"
        "2. Stock Market - KES 20000\n"
        "\n"
        "3. View Transaction History\n"
        "0. Main Menu"
    )
    backend.login.assert_awaited_once_with(PHONE, "5678")
    assert store.get(SESSION).state == UssdState.TRANSACTION_HISTORY
    assert store.get_form_field(SESSION, "account_ids") == ["acc-1", "acc-2"]
    assert store.get_form_field(SESSION, "user_id") == "user-1"


def test_track_accounts_without_accounts(event_loop, store, backend, sms):
    backend.list_accounts = AsyncMock(return_value=[])
    ctx = _ctx(store, backend, sms, UssdState.TRACK_ACCOUNTS)

    reply = event_loop.run_until_complete(account_tracking.handle_track_accounts(ctx, "5678"))

    assert reply == "END No accounts found."


def test_history_for_selected_account(event_loop, store, backend, sms):
    ctx = _ctx(store, backend, sms, UssdState.TRANSACTION_HISTORY)
    store.set_form_field(SESSION, "account_ids", ["acc-1", "acc-2"])
    backend.transaction_history = AsyncMock(
        return_value=[
            make_transaction("withdraw", "200", "1300", FIXED_NOW, "tx-2", "acc-2"),
            make_transaction("deposit", "500", "1500", FIXED_NOW - timedelta(days=1), "tx-1", "acc-2"),
        ]
    )

    reply = event_loop.run_until_complete(account_tracking.handle_transaction_history(ctx, "2"))

    backend.transaction_history.assert_awaited_once_with("acc-2", limit=10)
    assert reply.startswith("END Transaction History:")
    assert reply.index("WITHDRAW - KES 200") < reply.index("DEPOSIT - KES 500")
    assert "Date: 15/01/2025" in reply
    assert "Date: 14/01/2025" in reply
    assert "... and more" not in reply


def test_history_option_after_last_account_shows_first(event_loop, store, backend, sms):
    ctx = _ctx(store, backend, sms, UssdState.TRANSACTION_HISTORY)
    store.set_form_field(SESSION, "account_ids", ["acc-1", "acc-2"])

    event_loop.run_until_complete(account_tracking.handle_transaction_history(ctx, "3"))

    backend.transaction_history.assert_awaited_once_with("acc-1", limit=10)


def test_history_shows_five_most_recent(event_loop, store, backend, sms):
    ctx = _ctx(store, backend, sms, UssdState.TRANSACTION_HISTORY)
    store.set_form_field(SESSION, "account_ids", ["acc-1"])
    backend.transaction_history = AsyncMock(
        return_value=[make_transaction(amount=str(100 + i), tx_id=f"tx-{i}") for i in range(7)]
    )

    reply = event_loop.run_until_complete(account_tracking.handle_transaction_history(ctx, "1"))

    assert reply.count("DEPOSIT - KES") == 5
    assert "KES 104" in reply
    assert "KES 105" not in reply
    assert reply.endswith("... and more")


def test_history_without_transactions(event_loop, store, backend, sms):
    ctx = _ctx(store, backend, sms, UssdState.TRANSACTION_HISTORY)
    store.set_form_field(SESSION, "account_ids", ["acc-1"])
    backend.transaction_history = AsyncMock(return_value=[])

    reply = event_loop.run_until_complete(account_tracking.handle_transaction_history(ctx, "1"))

    assert reply == "END No transactions found for this account."


def test_history_zero_returns_to_main_menu(event_loop, store, backend, sms):
    ctx = _ctx(store, backend, sms, UssdState.TRANSACTION_HISTORY)

    reply = event_loop.run_until_complete(account_tracking.handle_transaction_history(ctx, "0"))

    assert reply.startswith("CON GKash Main Menu")
    assert store.get(SESSION).state == UssdState.MAIN_MENU


def test_history_invalid_choice_reprompts(event_loop, store, backend, sms):
    ctx = _ctx(store, backend, sms, UssdState.TRANSACTION_HISTORY)
    store.set_form_field(SESSION, "account_ids", ["acc-1"])

    for choice in ("x", "3"):
        reply = event_loop.run_until_complete(account_tracking.handle_transaction_history(ctx, choice))
        assert reply == "CON Invalid selection. Try again:"

    backend.transaction_history.assert_not_awaited()


def test_history_refetches_accounts_when_form_is_empty(event_loop, store, backend, sms):
    ctx = _ctx(store, backend, sms, UssdState.TRANSACTION_HISTORY)

    event_loop.run_until_complete(account_tracking.handle_transaction_history(ctx, "1"))

    backend.get_user_by_phone.assert_awaited_once_with(PHONE)
    backend.list_accounts.assert_awaited_once_with("user-1")
    backend.transaction_history.assert_awaited_once_with("acc-1", limit=10)


def test_history_unknown_user(event_loop, store, backend, sms):
    backend.get_user_by_phone = AsyncMock(return_value=None)
    ctx = _ctx(store, backend, sms, UssdState.TRANSACTION_HISTORY)

    reply = event_loop.run_until_complete(account_tracking.handle_transaction_history(ctx, "1"))

    assert reply == "END User not found."
