"""
Telegram Bot API transport.

Only the outbound ``sendMessage`` call is needed: the bot replies with
exactly one message per inbound message.
"""
import logging
from typing import Dict, Any, Optional, List

import httpx

from config.settings import settings, ConfigurationError

logger = logging.getLogger(__name__)

PARSE_ERROR_MARKER = "can't parse entities"


def build_send_payload(
    chat_id: int,
    text: str,
    reply_markup: Optional[Dict[str, List[List[Dict[str, str]]]]] = None
) -> Dict[str, Any]:
    """Build the JSON body for sendMessage; empty keyboards are omitted."""
    payload: Dict[str, Any] = {
        "chat_id": chat_id,
        "text": text,
        "parse_mode": "HTML",
    }
    if reply_markup and reply_markup.get("inline_keyboard"):
        payload["reply_markup"] = reply_markup
    return payload


def _post_with_plain_fallback(client: httpx.Client, url: str, payload: Dict[str, Any]) -> httpx.Response:
    """
    POST the payload. If Telegram cannot parse the HTML (stray "<" or "&"
    in user-typed text), send the same text once more without parse_mode.
    """
    response = client.post(url, json=payload)
    if response.status_code == 400 and PARSE_ERROR_MARKER in response.text:
        logger.warning("Telegram rejected HTML for chat_id=%s, resending as plain text", payload["chat_id"])
        plain = {key: value for key, value in payload.items() if key != "parse_mode"}
        response = client.post(url, json=plain)
    return response


def send_message(
    chat_id: int,
    text: str,
    reply_markup: Optional[Dict[str, Any]] = None,
    client: Optional[httpx.Client] = None
) -> Dict[str, Any]:
    """
    Send a message to a Telegram chat.

    Args:
        chat_id: Telegram chat ID
        text: Message text (HTML parse mode)
        reply_markup: Optional ``{"inline_keyboard": [[{"text", "callback_data"}]]}``
        client: httpx client to use (a short-lived one is created otherwise)

    Returns:
        Dictionary with ``success`` and either ``message_id`` or ``error``
    """
    logger.info("Sending message to chat_id=%s length=%d", chat_id, len(text))

    try:
        token = settings.require("telegram_bot_token")
    except ConfigurationError:
        logger.error("TELEGRAM_BOT_TOKEN not found")
        return {"success": False, "error": "Bot token not configured"}

    url = f"{settings.telegram_api_base.rstrip('/')}/bot{token}/sendMessage"
    payload = build_send_payload(chat_id, text, reply_markup)

    try:
        if client is not None:
            response = _post_with_plain_fallback(client, url, payload)
        else:
            with httpx.Client(timeout=settings.http_timeout) as http:
                response = _post_with_plain_fallback(http, url, payload)
    except httpx.HTTPError as exc:
        logger.error("Error sending Telegram message: %s", exc.__class__.__name__)
        return {"success": False, "error": f"Transport error: {exc.__class__.__name__}"}

    if response.is_error:
        logger.error(
            "Telegram API error: status=%s body=%s", response.status_code, response.text[:500]
        )
        return {
            "success": False,
            "error": f"Telegram API error: {response.status_code} {response.reason_phrase}"
        }

    try:
        result = response.json()
    except ValueError:
        result = {}
    logger.info("Message sent to chat_id=%s", chat_id)

    return {
        "success": True,
        "message_id": (result.get("result") or {}).get("message_id"),
    }
