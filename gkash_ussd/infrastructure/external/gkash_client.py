# gkash_ussd/infrastructure/external/gkash_client.py
"""
GKash account backend client.

Thin typed wrapper over the GKash REST API:

  POST /users                         create user
  POST /auth/login                    phone + PIN login
  POST /auth/verify-pin               PIN check for a known user
  GET  /users/phone/{phone}           lookup by phone (404 → None)
  GET  /users/{id}/accounts           list accounts
  POST /accounts                      open an account of a given type
  GET  /accounts/{id}/balance         current balance
  GET  /accounts/{id}/transactions    history, most recent first
  POST /transactions/deposit          deposit
  POST /transactions/withdraw         withdraw (backend enforces minimum balance)

Failures are translated at this boundary: 401/403 become ``AuthError``,
everything else ``UpstreamError``, both carrying the backend's ``message``.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

import httpx

from gkash_ussd.core.config import settings
from gkash_ussd.domain.errors import AuthError, UpstreamError
from gkash_ussd.domain.models.gkash import Account, LoginResult, Transaction, User

logger = logging.getLogger("gkash_client")

_DEFAULT_ERROR = "API request failed"


def _error_message(response: httpx.Response) -> tuple[str, dict]:
    body: dict = {}
    try:
        parsed = response.json()
        if isinstance(parsed, dict):
            body = parsed
    except ValueError:
        pass
    return str(body.get("message") or _DEFAULT_ERROR), body


class GKashClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base = (base_url or settings.GKASH_API_URL).rstrip("/")
        self.timeout = timeout or settings.GKASH_API_TIMEOUT_SECONDS
        self._transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        json_body: dict | None = None,
        params: Dict[str, Any] | None = None,
    ) -> Any:
        url = f"{self.base}{path}"
        logger.debug("GKash %s %s", method, path)

        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
            headers={"Content-Type": "application/json"},
        ) as client:
            try:
                r = await client.request(method, url, json=json_body, params=params)
                r.raise_for_status()
                return r.json()
            except httpx.HTTPStatusError as exc:
                message, body = _error_message(exc.response)
                status = exc.response.status_code
                logger.warning("GKash HTTP error: %s %s -> %d %s", method, path, status, message)
                if status in (401, 403):
                    raise AuthError(message) from exc
                raise UpstreamError(message, status_code=status, response=body) from exc
            except httpx.TimeoutException as exc:
                logger.error("GKash timeout: %s %s", method, path)
                raise UpstreamError("GKash API timeout") from exc
            except httpx.HTTPError as exc:
                logger.error("GKash transport error: %s %s (%s)", method, path, exc)
                raise UpstreamError(_DEFAULT_ERROR) from exc
            except ValueError as exc:
                logger.error("GKash returned non-JSON body: %s %s", method, path)
                raise UpstreamError("Invalid response from GKash API") from exc

    # ----------------------------------------------------------------
    # Users & auth
    # ----------------------------------------------------------------

    async def create_user(self, name: str, phone_number: str, id_number: str, pin: str) -> User:
        data = await self._request(
            "POST",
            "/users",
            json_body={"name": name, "phoneNumber": phone_number, "idNumber": id_number, "pin": pin},
        )
        return User.model_validate(data)

    async def login(self, phone_number: str, pin: str) -> LoginResult:
        data = await self._request("POST", "/auth/login", json_body={"phoneNumber": phone_number, "pin": pin})
        return LoginResult.model_validate(data)

    async def get_user_by_phone(self, phone_number: str) -> Optional[User]:
        try:
            data = await self._request("GET", f"/users/phone/{phone_number}")
        except UpstreamError as exc:
            if exc.status_code == 404:
                return None
            raise
        return User.model_validate(data)

    async def verify_pin(self, user_id: str, pin: str) -> bool:
        try:
            data = await self._request("POST", "/auth/verify-pin", json_body={"userId": user_id, "pin": pin})
        except (AuthError, UpstreamError):
            return False
        return bool((data or {}).get("valid"))

    # ----------------------------------------------------------------
    # Accounts
    # ----------------------------------------------------------------

    async def create_account(self, user_id: str, account_type: str) -> Account:
        data = await self._request("POST", "/accounts", json_body={"userId": user_id, "accountType": account_type})
        return Account.model_validate(data)

    async def list_accounts(self, user_id: str) -> List[Account]:
        data = await self._request("GET", f"/users/{user_id}/accounts")
        return [Account.model_validate(item) for item in data or []]

    async def get_balance(self, account_id: str) -> Decimal:
        data = await self._request("GET", f"/accounts/{account_id}/balance")
        return Decimal(str(data["balance"]))

    # ----------------------------------------------------------------
    # Transactions
    # ----------------------------------------------------------------

    async def deposit(self, account_id: str, amount: Decimal, pin: str) -> Transaction:
        data = await self._request(
            "POST",
            "/transactions/deposit",
            json_body={"accountId": account_id, "amount": float(amount), "pin": pin},
        )
        return Transaction.model_validate(data)

    async def withdraw(self, account_id: str, amount: Decimal, pin: str) -> Transaction:
        data = await self._request(
            "POST",
            "/transactions/withdraw",
            json_body={"accountId": account_id, "amount": float(amount), "pin": pin},
        )
        return Transaction.model_validate(data)

    async def transaction_history(self, account_id: str, limit: int = 10) -> List[Transaction]:
        data = await self._request("GET", f"/accounts/{account_id}/transactions", params={"limit": limit})
        transactions = [Transaction.model_validate(item) for item in data or []]
        # Most recent first, whatever order the backend used
        return sorted(transactions, key=lambda tx: tx.timestamp, reverse=True)
