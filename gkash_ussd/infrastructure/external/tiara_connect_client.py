from __future__ import annotations

import logging
from decimal import Decimal

import httpx

from gkash_ussd.core.config import settings
from gkash_ussd.core.logging_config import mask_phone

logger = logging.getLogger("tiara_connect_client")


class TiaraConnectClient:
    """
    TiaraConnect SMS + USSD gateway client.

    SMS delivery is fire-and-forget: a failed send is logged and swallowed so a
    notification problem never breaks the dialogue step that triggered it.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        shortcode: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base = (base_url or settings.TIARA_CONNECT_BASE_URL).rstrip("/")
        self.api_key = settings.TIARA_CONNECT_API_KEY if api_key is None else api_key
        self._shortcode = shortcode or settings.TIARA_CONNECT_SHORTCODE
        self.timeout = timeout or settings.SMS_TIMEOUT_SECONDS
        self._transport = transport

    @property
    def shortcode(self) -> str:
        return self._shortcode

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    async def _post(self, path: str, payload: dict) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(f"{self.base}{path}", json=payload, headers=self._headers())
            resp.raise_for_status()
            return resp

    async def send_sms(self, phone_number: str, message: str) -> bool:
        """Send an SMS. Returns True on success, False on any failure (never raises)."""
        try:
            await self._post("/sms/send", {"to": phone_number, "from": self._shortcode, "message": message})
        except httpx.HTTPError as exc:
            logger.error("Failed to send SMS to %s: %s", mask_phone(phone_number), exc)
            return False
        except Exception:
            logger.exception("Unexpected error sending SMS to %s", mask_phone(phone_number))
            return False
        logger.info("SMS sent to %s", mask_phone(phone_number))
        return True

    async def send_ussd_response(
        self,
        session_id: str,
        msisdn: str,
        response: str,
        continue_session: bool | None = None,
    ) -> None:
        """Push a USSD reply back to the gateway (asynchronous gateway mode)."""
        if continue_session is None:
            continue_session = response.startswith("CON")
        await self._post(
            "/ussd/respond",
            {
                "sessionId": session_id,
                "msisdn": msisdn,
                "message": response,
                "continueSession": continue_session,
            },
        )

    @staticmethod
    def format_ussd_response(message: str, continue_session: bool = True) -> str:
        if message.startswith("CON ") or message.startswith("END "):
            return message
        prefix = "CON" if continue_session else "END"
        return f"{prefix} {message}"

    async def send_transaction_notification(
        self, phone_number: str, tx_type: str, amount: Decimal, balance: Decimal
    ) -> bool:
        try:
            message = (
                f"GKash: {tx_type} of KES {Decimal(amount):.2f} successful. "
                f"New balance: KES {Decimal(balance):.2f}"
            )
        except Exception:
            logger.exception("Could not build transaction SMS for %s", mask_phone(phone_number))
            return False
        return await self.send_sms(phone_number, message)

    async def send_account_creation_notification(self, phone_number: str, account_type: str) -> bool:
        message = (
            f"GKash: Your {account_type} account has been created successfully. "
            f"Dial {self._shortcode} to access your account."
        )
        return await self.send_sms(phone_number, message)
