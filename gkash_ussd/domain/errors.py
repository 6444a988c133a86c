# gkash_ussd/domain/errors.py
"""
Error taxonomy for the USSD dialogue.

Only ``ValidationError`` is recovered without ending the session; every other
``GKashError`` is caught once by the dispatcher, which destroys the session and
surfaces the message to the subscriber.
"""

from __future__ import annotations


class GKashError(Exception):
    """Base class for all dialogue-level failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(GKashError):
    """Malformed step input (phone, ID, PIN, amount or menu choice)."""


class AuthError(GKashError):
    """Backend rejected the phone/PIN combination."""


class UpstreamError(GKashError):
    """Any other backend failure: network, 5xx or a business-rule rejection."""

    def __init__(self, message: str, status_code: int = 0, response: dict | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response or {}


class InsufficientFundsError(UpstreamError):
    """Withdrawal would take the account below its type's minimum balance."""


class SessionError(GKashError):
    """Dispatch reached a state with no handler, or a flow is missing its data."""


class CatalogError(GKashError):
    """A stored account carries a type tag outside the known catalog."""
