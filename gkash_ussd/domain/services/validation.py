# gkash_ussd/domain/services/validation.py

import re
from decimal import Decimal, InvalidOperation

from gkash_ussd.domain.errors import ValidationError

# Optional national prefix, then a 7xx / 1xx subscriber prefix and 8 digits
PHONE_REGEX = re.compile(r"^(?:\+254|254|0)?[17]\d{8}$")
ID_NUMBER_REGEX = re.compile(r"^\d{8}$")
PIN_REGEX = re.compile(r"^\d{4}$")

WEAK_PINS = frozenset([d * 4 for d in "0123456789"] + ["1234", "4321"])

_PHONE_NOISE = re.compile(r"[\s\-()]")

# Largest single deposit or withdrawal accepted from the menu
MAX_AMOUNT = Decimal("1000000000")
CENT = Decimal("0.01")


def _clean_phone(raw: str) -> str:
    return _PHONE_NOISE.sub("", raw or "")


def is_valid_phone(phone: str | None) -> bool:
    if not phone:
        return False
    return bool(PHONE_REGEX.match(_clean_phone(phone)))


def normalize_phone(phone: str) -> str:
    """Normalize a Kenyan mobile number to ``+254XXXXXXXXX``.

    Accepts ``0712345678``, ``254712345678``, ``+254712345678`` and the bare
    ``712345678`` form. Normalizing an already-normalized number is a no-op.

    Raises ``ValidationError`` if the input is not a valid mobile number.
    """
    cleaned = _clean_phone(phone)
    if not PHONE_REGEX.match(cleaned):
        raise ValidationError("Invalid phone number")

    if cleaned.startswith("+254"):
        return cleaned
    if cleaned.startswith("254"):
        return "+" + cleaned
    if cleaned.startswith("0"):
        return "+254" + cleaned[1:]
    return "+254" + cleaned


def is_valid_id_number(id_number: str | None) -> bool:
    if not id_number:
        return False
    return bool(ID_NUMBER_REGEX.match(id_number))


def is_valid_pin(pin: str | None) -> bool:
    """4 digits, and not a repeated digit or a straight 1234/4321 run."""
    if not pin or not PIN_REGEX.match(pin):
        return False
    return pin not in WEAK_PINS


def is_valid_name(name: str | None) -> bool:
    return bool(name) and len(name.strip()) >= 2


def parse_amount(text: str | None) -> Decimal:
    """Parse a positive amount in whole cents, at most ``MAX_AMOUNT``.

    Raises ``ValidationError`` for anything else, so the caller re-prompts.
    """
    raw = (text or "").strip().replace(",", "")
    try:
        amount = Decimal(raw)
    except InvalidOperation as exc:
        raise ValidationError("Invalid amount") from exc

    if not amount.is_finite() or amount <= 0 or amount > MAX_AMOUNT:
        raise ValidationError("Invalid amount")
    if amount != amount.quantize(CENT):
        raise ValidationError("Invalid amount")
    return amount


def format_kes(value) -> str:
    """Render a money value the way menus show it: ``500``, ``1500``, ``99.50``."""
    amount = Decimal(str(value))
    try:
        if amount == amount.to_integral_value():
            return str(amount.quantize(Decimal(1)))
        return str(amount.quantize(CENT))
    except InvalidOperation:
        # More digits than the decimal context holds
        return format(amount, "f")
