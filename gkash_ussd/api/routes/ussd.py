# gkash_ussd/api/routes/ussd.py
"""
USSD gateway callback.

  POST /ussd   → plain-text "CON ..." / "END ..." reply

Gateways differ in body encoding (form or JSON) and field casing
(``sessionId``/``SessionId``, ``phoneNumber``/``msisdn``, ``text``/``Text``);
all of them are accepted here and reduced to one shape before dispatch.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from gkash_ussd.api.deps import get_dispatcher
from gkash_ussd.core.logging_config import mask_phone
from gkash_ussd.domain.services.ussd_dispatcher import UssdDispatcher
from gkash_ussd.domain.ussd_text import end, t

logger = logging.getLogger("ussd_route")

router = APIRouter()


def normalize_ussd_payload(payload: dict | None) -> dict:
    """Map gateway field variants onto ``session_id``, ``phone_number``, ``text``."""
    if payload is None:
        payload = {}

    session_id = payload.get("sessionId") or payload.get("SessionId") or ""
    phone_number = payload.get("phoneNumber") or payload.get("msisdn") or ""
    text = payload.get("text")
    if text is None:
        text = payload.get("Text")

    return {
        "session_id": str(session_id).strip(),
        "phone_number": str(phone_number).strip(),
        "text": "" if text is None else str(text),
    }


async def _read_payload(request: Request) -> dict:
    content_type = request.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            body = await request.json()
        except ValueError:
            logger.warning("USSD callback with malformed JSON body")
            return {}
        return body if isinstance(body, dict) else {}

    form = await request.form()
    return dict(form)


@router.post("/ussd", response_class=PlainTextResponse)
async def ussd_callback(request: Request, dispatcher: UssdDispatcher = Depends(get_dispatcher)):
    payload = normalize_ussd_payload(await _read_payload(request))
    session_id = payload["session_id"]
    phone_number = payload["phone_number"]

    if not session_id or not phone_number:
        logger.warning("USSD callback missing sessionId or phone number")
        return PlainTextResponse(end(t("INVALID_REQUEST")))

    logger.debug("USSD %s from %s", session_id, mask_phone(phone_number))

    try:
        reply = await dispatcher.handle(session_id, phone_number, payload["text"])
    except Exception as exc:
        logger.exception("USSD dispatch failed for session %s", session_id)
        reply = end(t("ERROR", message=str(exc)))

    return PlainTextResponse(reply)
