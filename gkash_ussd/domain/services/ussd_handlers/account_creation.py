# gkash_ussd/domain/services/ussd_handlers/account_creation.py
"""
Account creation flow.

States handled:
    CREATE_NAME          : full name (≥ 2 chars)
    CREATE_PHONE         : mobile number, stored normalized as +254XXXXXXXXX
    CREATE_ID            : 8-digit national ID
    CREATE_PIN           : 4-digit PIN, weak patterns rejected
    SELECT_ACCOUNT_TYPE  : pick a fund product, then create user + account + SMS

Invalid input re-prompts in the same state; nothing is sent to the backend
until the final selection.
"""

from __future__ import annotations

import logging

from gkash_ussd.core.logging_config import mask_phone
from gkash_ussd.domain.models import account_types
from gkash_ussd.domain.models.session import UssdState
from gkash_ussd.domain.services.ussd_handlers.context import Handler, HandlerContext
from gkash_ussd.domain.services.validation import (
    is_valid_id_number,
    is_valid_name,
    is_valid_phone,
    is_valid_pin,
    normalize_phone,
)
from gkash_ussd.domain.ussd_text import con, end, t

logger = logging.getLogger("ussd_handlers.account_creation")


def _account_type_menu() -> str:
    return con(t("SELECT_ACCOUNT_TYPE", menu=account_types.render_menu()))


async def handle_create_name(ctx: HandlerContext, text: str) -> str:
    if not is_valid_name(text):
        return con(t("INVALID_NAME"))

    ctx.remember("name", text.strip())
    ctx.goto(UssdState.CREATE_PHONE)
    return con(t("ASK_PHONE"))


async def handle_create_phone(ctx: HandlerContext, text: str) -> str:
    if not is_valid_phone(text):
        return con(t("INVALID_PHONE"))

    ctx.remember("phone_number", normalize_phone(text))
    ctx.goto(UssdState.CREATE_ID)
    return con(t("ASK_ID"))


async def handle_create_id(ctx: HandlerContext, text: str) -> str:
    if not is_valid_id_number(text):
        return con(t("INVALID_ID"))

    ctx.remember("id_number", text)
    ctx.goto(UssdState.CREATE_PIN)
    return con(t("ASK_PIN"))


async def handle_create_pin(ctx: HandlerContext, text: str) -> str:
    if not is_valid_pin(text):
        return con(t("INVALID_PIN"))

    ctx.remember("pin", text)
    ctx.goto(UssdState.SELECT_ACCOUNT_TYPE)
    return _account_type_menu()


async def handle_select_account_type(ctx: HandlerContext, text: str) -> str:
    choice = int(text) if text.isdigit() else 0
    info = account_types.by_index(choice)
    if info is None:
        return con(t("INVALID_ACCOUNT_TYPE", count=len(account_types.ACCOUNT_TYPES)))

    details = ctx.session.form.registration()

    user = await ctx.backend.create_user(
        name=details.name,
        phone_number=details.phone_number,
        id_number=details.id_number,
        pin=details.pin,
    )
    account = await ctx.backend.create_account(user.id, info.tag)
    logger.info(
        "Created %s account %s for %s",
        info.tag,
        account.account_number,
        mask_phone(details.phone_number),
    )

    await ctx.sms.send_account_creation_notification(details.phone_number, info.name)

    return end(
        t(
            "ACCOUNT_CREATED",
            name=details.name,
            account_number=account.account_number,
            type_name=info.name,
        )
    )


HANDLERS: dict[UssdState, Handler] = {
    UssdState.CREATE_NAME: handle_create_name,
    UssdState.CREATE_PHONE: handle_create_phone,
    UssdState.CREATE_ID: handle_create_id,
    UssdState.CREATE_PIN: handle_create_pin,
    UssdState.SELECT_ACCOUNT_TYPE: handle_select_account_type,
}
