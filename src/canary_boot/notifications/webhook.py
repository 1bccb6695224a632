# src/canary_boot/notifications/webhook.py
"""
Webhook de start-up do servidor.

O envio roda na thread do Worker de database tasks, fora do dispatcher,
com um event loop próprio por mensagem. Falhas de rede nunca afetam o
bootstrap: são logadas e o envio devolve False.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

import aiohttp
from aiohttp import ClientTimeout

from canary_boot.core.workers.dispatcher import DATABASE_TASKS

if TYPE_CHECKING:
    from canary_boot.core.context import BootContext

logger = logging.getLogger(__name__)

WEBHOOK_COLOR_ONLINE = 0x00FF00

# Timeout curto: o webhook não pode segurar a fila de I/O
WEBHOOK_TIMEOUT = ClientTimeout(
    total=15,
    connect=5,
    sock_read=10,
)

ONLINE_TITLE = "Server is now online"
ONLINE_MESSAGE = "Server has successfully started."

Sender = Callable[[str, str, str, int], Any]


def build_webhook_payload(title: str, message: str, color: int) -> Dict[str, Any]:
    return {
        "embeds": [
            {
                "title": title,
                "description": message,
                "color": color,
            }
        ]
    }


async def send_webhook_message(
    url: str,
    title: str,
    message: str,
    color: int,
    *,
    session: Optional[aiohttp.ClientSession] = None,
) -> bool:
    """
    Publica uma mensagem no webhook.

    Returns:
        bool: True para respostas 2xx, False para qualquer outra resposta
        ou erro de transporte.
    """
    payload = build_webhook_payload(title, message, color)
    owns_session = session is None
    if owns_session:
        session = aiohttp.ClientSession(timeout=WEBHOOK_TIMEOUT)

    try:
        async with session.post(url, json=payload) as resp:
            if 200 <= resp.status < 300:
                return True
            body = await resp.text()
            logger.error("Webhook rejected message (HTTP %d): %s", resp.status, body[:200])
            return False
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.error("Failed to send webhook message: %s", e)
        return False
    finally:
        if owns_session:
            await session.close()


def deliver_webhook(url: str, title: str, message: str, color: int) -> bool:
    """Versão síncrona de `send_webhook_message`, para rodar em um Worker."""
    return asyncio.run(send_webhook_message(url, title, message, color))


def webhook_post_start_hook(ctx: "BootContext", *, sender: Optional[Sender] = None) -> bool:
    """
    Agenda o aviso de servidor online na fila de database tasks.

    Returns:
        bool: True se o envio foi agendado.
    """
    url = ctx.setting("notifications", "webhook_url", "")
    if not url:
        return False

    if not ctx.workers.has(DATABASE_TASKS):
        logger.warning("Webhook not sent: no %s worker", DATABASE_TASKS)
        return False

    send = sender or deliver_webhook
    return ctx.workers.get(DATABASE_TASKS).submit(
        lambda: send(url, ONLINE_TITLE, ONLINE_MESSAGE, WEBHOOK_COLOR_ONLINE)
    )
