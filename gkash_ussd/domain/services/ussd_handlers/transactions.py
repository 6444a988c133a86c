# gkash_ussd/domain/services/ussd_handlers/transactions.py
"""
Money movement and balance enquiry.

States handled:
    DEPOSIT_AMOUNT / DEPOSIT_PIN    : amount, then PIN → login → deposit → SMS
    WITHDRAW_AMOUNT / WITHDRAW_PIN  : amount, then PIN → login → withdraw → SMS
    BALANCE_PIN                     : PIN → login → all account balances

The PIN entered here is not validated locally: it goes straight to the backend
login, which is the only authority on whether it is right. Transactions always
run against the subscriber's first account.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from gkash_ussd.core.logging_config import mask_phone
from gkash_ussd.domain.errors import InsufficientFundsError, SessionError, ValidationError
from gkash_ussd.domain.models import account_types
from gkash_ussd.domain.models.session import UssdState
from gkash_ussd.domain.services.ussd_handlers.context import Handler, HandlerContext
from gkash_ussd.domain.services.validation import format_kes, parse_amount
from gkash_ussd.domain.ussd_text import con, end, t

logger = logging.getLogger("ussd_handlers.transactions")


async def _login_accounts(ctx: HandlerContext, pin: str) -> list:
    phone = ctx.subscriber_phone()
    result = await ctx.backend.login(phone, pin)
    return await ctx.backend.list_accounts(result.user.id)


def _stored_amount(ctx: HandlerContext) -> Decimal:
    amount = ctx.recall("amount")
    if amount is None:
        raise SessionError("Amount missing from session")
    return amount


# ---------------------------------------------------------------------------
# Amount entry
# ---------------------------------------------------------------------------

async def handle_deposit_amount(ctx: HandlerContext, text: str) -> str:
    try:
        amount = parse_amount(text)
    except ValidationError:
        return con(t("INVALID_DEPOSIT_AMOUNT"))

    ctx.remember("amount", amount)
    ctx.goto(UssdState.DEPOSIT_PIN)
    return con(t("CONFIRM_DEPOSIT", amount=format_kes(amount)))


async def handle_withdraw_amount(ctx: HandlerContext, text: str) -> str:
    try:
        amount = parse_amount(text)
    except ValidationError:
        return con(t("INVALID_WITHDRAW_AMOUNT"))

    ctx.remember("amount", amount)
    ctx.goto(UssdState.WITHDRAW_PIN)
    return con(t("CONFIRM_WITHDRAW", amount=format_kes(amount)))


# ---------------------------------------------------------------------------
# PIN confirmation
# ---------------------------------------------------------------------------

async def handle_deposit_pin(ctx: HandlerContext, text: str) -> str:
    amount = _stored_amount(ctx)
    accounts = await _login_accounts(ctx, text)
    if not accounts:
        return end(t("NO_ACCOUNTS_CREATE_FIRST"))

    account = accounts[0]
    tx = await ctx.backend.deposit(account.id, amount, text)
    logger.info("Deposit on %s by %s", account.account_number, mask_phone(ctx.session.phone_number))

    await ctx.sms.send_transaction_notification(ctx.session.phone_number, "Deposit", amount, tx.balance)

    return end(
        t(
            "TRANSACTION_DONE",
            title="Deposit",
            amount=format_kes(amount),
            balance=format_kes(tx.balance),
            account_number=account.account_number,
            time=ctx.now_text(),
        )
    )


async def handle_withdraw_pin(ctx: HandlerContext, text: str) -> str:
    amount = _stored_amount(ctx)
    accounts = await _login_accounts(ctx, text)
    if not accounts:
        return end(t("NO_ACCOUNTS_CREATE_FIRST"))

    account = accounts[0]
    # Mirror of the backend rule, so the subscriber sees the minimum in the message
    minimum = account_types.lookup(account.type).min_balance
    if account.balance - amount < minimum:
        raise InsufficientFundsError(t("INSUFFICIENT_FUNDS", min_balance=format_kes(minimum)))

    tx = await ctx.backend.withdraw(account.id, amount, text)
    logger.info("Withdrawal on %s by %s", account.account_number, mask_phone(ctx.session.phone_number))

    await ctx.sms.send_transaction_notification(ctx.session.phone_number, "Withdrawal", amount, tx.balance)

    return end(
        t(
            "TRANSACTION_DONE",
            title="Withdrawal",
            amount=format_kes(amount),
            balance=format_kes(tx.balance),
            account_number=account.account_number,
            time=ctx.now_text(),
        )
    )


async def handle_balance_pin(ctx: HandlerContext, text: str) -> str:
    accounts = await _login_accounts(ctx, text)
    if not accounts:
        return end(t("NO_ACCOUNTS"))

    entries = [
        t(
            "BALANCE_ENTRY",
            type_name=account_types.lookup(account.type).name,
            account_number=account.account_number,
            balance=format_kes(account.balance),
        )
        for account in accounts
    ]
    body = "\n\n".join([t("BALANCES_HEADER"), *entries, t("BALANCES_UPDATED", time=ctx.now_text())])
    return end(body)


HANDLERS: dict[UssdState, Handler] = {
    UssdState.DEPOSIT_AMOUNT: handle_deposit_amount,
    UssdState.DEPOSIT_PIN: handle_deposit_pin,
    UssdState.WITHDRAW_AMOUNT: handle_withdraw_amount,
    UssdState.WITHDRAW_PIN: handle_withdraw_pin,
    UssdState.BALANCE_PIN: handle_balance_pin,
}
