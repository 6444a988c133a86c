# gkash_ussd/domain/services/ussd_handlers/main_menu.py
"""
Entry menus.

States handled:
    WELCOME   : first screen of every session: create account / main menu / help
    MAIN_MENU : deposit, withdraw, balance, track accounts, exit
"""

from __future__ import annotations

import logging

from gkash_ussd.domain.models.session import UssdState
from gkash_ussd.domain.services.ussd_handlers.context import Handler, HandlerContext
from gkash_ussd.domain.ussd_text import con, end, t

logger = logging.getLogger("ussd_handlers.main_menu")


async def handle_welcome(ctx: HandlerContext, text: str) -> str:
    options = t("WELCOME_OPTIONS")

    if not text:
        return con(t("WELCOME", options=options))

    if text == "1":
        ctx.goto(UssdState.CREATE_NAME)
        return con(t("ASK_NAME"))

    if text == "2":
        ctx.goto(UssdState.MAIN_MENU)
        return await handle_main_menu(ctx, "")

    if text == "3":
        return end(t("HELP"))

    return con(t("WELCOME_INVALID", options=options))


async def handle_main_menu(ctx: HandlerContext, text: str) -> str:
    if not text:
        return con(t("MAIN_MENU"))

    if text == "1":
        ctx.goto(UssdState.DEPOSIT_AMOUNT)
        return con(t("ASK_DEPOSIT_AMOUNT"))

    if text == "2":
        ctx.goto(UssdState.WITHDRAW_AMOUNT)
        return con(t("ASK_WITHDRAW_AMOUNT"))

    if text == "3":
        ctx.goto(UssdState.BALANCE_PIN)
        return con(t("ASK_BALANCE_PIN"))

    if text == "4":
        ctx.goto(UssdState.TRACK_ACCOUNTS)
        # account_tracking imports this module
        from gkash_ussd.domain.services.ussd_handlers.account_tracking import handle_track_accounts

        return await handle_track_accounts(ctx, "")

    if text == "0":
        return end(t("GOODBYE"))

    return con(t("MAIN_MENU_INVALID"))


HANDLERS: dict[UssdState, Handler] = {
    UssdState.WELCOME: handle_welcome,
    UssdState.MAIN_MENU: handle_main_menu,
}
