# gkash_ussd/domain/services/ussd_handlers/account_tracking.py
"""
Account tracking.

States handled:
    TRACK_ACCOUNTS      : first visit hands over to BALANCE_PIN for the PIN prompt;
                          a PIN here logs in and lists every account
    TRANSACTION_HISTORY : pick an account (1..n), n+1 for the first account's
                          history, 0 back to the main menu
"""

from __future__ import annotations

import logging

from gkash_ussd.domain.models import account_types
from gkash_ussd.domain.models.session import UssdState
from gkash_ussd.domain.services.ussd_handlers.context import (
    DISPLAY_DATE_FORMAT,
    Handler,
    HandlerContext,
)
from gkash_ussd.domain.services.ussd_handlers.main_menu import handle_main_menu
from gkash_ussd.domain.services.validation import format_kes
from gkash_ussd.domain.ussd_text import con, end, t

logger = logging.getLogger("ussd_handlers.account_tracking")

HISTORY_FETCH_LIMIT = 10
HISTORY_DISPLAY_LIMIT = 5


async def handle_track_accounts(ctx: HandlerContext, text: str) -> str:
    if not text:
        # The PIN is collected by BALANCE_PIN
        ctx.goto(UssdState.BALANCE_PIN)
        return con(t("ASK_TRACK_PIN"))

    result = await ctx.backend.login(ctx.subscriber_phone(), text)
    accounts = await ctx.backend.list_accounts(result.user.id)
    if not accounts:
        return end(t("NO_ACCOUNTS"))

    ctx.remember("user_id", result.user.id)
    ctx.remember("account_ids", [account.id for account in accounts])
    ctx.goto(UssdState.TRANSACTION_HISTORY)

    lines = [t("ACCOUNT_LIST_HEADER")]
    for index, account in enumerate(accounts, start=1):
        lines.append(
            t(
                "ACCOUNT_LIST_ENTRY",
                index=index,
                type_name=account_types.lookup(account.type).name,
                balance=format_kes(account.balance),
            )
        )
    lines.append("")
    lines.append(t("ACCOUNT_LIST_FOOTER", history_index=len(accounts) + 1))
    return con("\n".join(lines))


async def _account_ids(ctx: HandlerContext) -> list[str] | None:
    """Account ids listed on the previous screen, re-fetched if the form lost them."""
    stored = ctx.recall("account_ids")
    if stored:
        return list(stored)

    user = await ctx.backend.get_user_by_phone(ctx.subscriber_phone())
    if user is None:
        return None
    accounts = await ctx.backend.list_accounts(user.id)
    return [account.id for account in accounts]


def _render_history(transactions: list) -> str:
    lines = [t("HISTORY_HEADER"), ""]
    for tx in transactions[:HISTORY_DISPLAY_LIMIT]:
        lines.append(
            t(
                "HISTORY_ENTRY",
                type=tx.type.upper(),
                amount=format_kes(tx.amount),
                balance=format_kes(tx.balance),
                date=tx.timestamp.strftime(DISPLAY_DATE_FORMAT),
            )
        )
        lines.append("")
    if len(transactions) > HISTORY_DISPLAY_LIMIT:
        lines.append(t("HISTORY_MORE"))
    return "\n".join(lines).rstrip()


async def handle_transaction_history(ctx: HandlerContext, text: str) -> str:
    if text == "0":
        ctx.goto(UssdState.MAIN_MENU)
        return await handle_main_menu(ctx, "")

    if not text.isdigit():
        return con(t("INVALID_HISTORY_CHOICE"))

    account_ids = await _account_ids(ctx)
    if account_ids is None:
        return end(t("USER_NOT_FOUND"))
    if not account_ids:
        return end(t("NO_ACCOUNTS"))

    choice = int(text)
    if 1 <= choice <= len(account_ids):
        account_id = account_ids[choice - 1]
    elif choice == len(account_ids) + 1:
        account_id = account_ids[0]
    else:
        return con(t("INVALID_HISTORY_CHOICE"))

    transactions = await ctx.backend.transaction_history(account_id, limit=HISTORY_FETCH_LIMIT)
    if not transactions:
        return end(t("NO_TRANSACTIONS"))

    logger.debug("Showing %d transaction(s) for account %s", len(transactions), account_id)
    return end(_render_history(transactions))


HANDLERS: dict[UssdState, Handler] = {
    UssdState.TRACK_ACCOUNTS: handle_track_accounts,
    UssdState.TRANSACTION_HISTORY: handle_transaction_history,
}
