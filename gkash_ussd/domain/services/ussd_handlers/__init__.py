# gkash_ussd/domain/services/ussd_handlers/__init__.py
"""
USSD state handlers.

Each sub-module exposes a ``HANDLERS`` mapping from ``UssdState`` to a
coroutine. ``ussd_dispatcher`` looks the current session state up in the
merged ``HANDLER_TABLE`` and awaits the handler.

Handler signature::

    async def handler(ctx: HandlerContext, text: str) -> str

``text`` is the trimmed step input ("" on first visit to a state); the return
value is the full gateway reply, starting with ``CON `` or ``END ``.
"""

from __future__ import annotations

from gkash_ussd.domain.models.session import UssdState

from . import account_creation, account_tracking, main_menu, transactions
from .context import Handler, HandlerContext

HANDLER_MODULES = (main_menu, account_creation, transactions, account_tracking)


def _build_table() -> dict[UssdState, Handler]:
    table: dict[UssdState, Handler] = {}
    for module in HANDLER_MODULES:
        for state, handler in module.HANDLERS.items():
            if state in table:
                raise RuntimeError(f"State {state.value} handled twice ({module.__name__})")
            table[state] = handler

    missing = [state.value for state in UssdState if state not in table]
    if missing:
        raise RuntimeError(f"No handler registered for: {', '.join(missing)}")
    return table


# Every state has exactly one handler; checked at import
HANDLER_TABLE: dict[UssdState, Handler] = _build_table()

__all__ = ["HANDLER_TABLE", "Handler", "HandlerContext"]
