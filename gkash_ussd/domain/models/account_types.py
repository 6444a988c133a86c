# gkash_ussd/domain/models/account_types.py
"""
Fund products a subscriber can open.

The order is part of the USSD contract: entries are shown as numbered menu
options, so position ``k`` must always mean the same product.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from gkash_ussd.domain.errors import CatalogError


@dataclass(frozen=True)
class AccountTypeInfo:
    tag: str
    name: str
    min_balance: Decimal


ACCOUNT_TYPES: tuple[AccountTypeInfo, ...] = (
    AccountTypeInfo("balanced_fund", "Balanced Fund", Decimal("1000")),
    AccountTypeInfo("fixed_income", "Fixed Income", Decimal("5000")),
    AccountTypeInfo("money_market", "Money Market", Decimal("10000")),
    AccountTypeInfo("stock_market", "Stock Market", Decimal("20000")),
)

_BY_TAG = {info.tag: info for info in ACCOUNT_TYPES}


def by_index(choice: int) -> AccountTypeInfo | None:
    """Return the ``choice``-th product (1-based) or None when out of range."""
    if 1 <= choice <= len(ACCOUNT_TYPES):
        return ACCOUNT_TYPES[choice - 1]
    return None


def lookup(tag: str) -> AccountTypeInfo:
    info = _BY_TAG.get(tag)
    if info is None:
        raise CatalogError(f"Unknown account type: {tag}")
    return info


def render_menu() -> str:
    return "\n".join(
        f"{i}. {info.name} (Min: KES {info.min_balance})"
        for i, info in enumerate(ACCOUNT_TYPES, start=1)
    )
