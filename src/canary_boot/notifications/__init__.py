# src/canary_boot/notifications/__init__.py
"""
Notificações externas emitidas pelo bootstrap.

- **webhook**: aviso "Server is now online" depois do start-up
"""

from .webhook import (
    WEBHOOK_COLOR_ONLINE,
    WEBHOOK_TIMEOUT,
    build_webhook_payload,
    deliver_webhook,
    send_webhook_message,
    webhook_post_start_hook,
)

__all__ = [
    "WEBHOOK_COLOR_ONLINE",
    "WEBHOOK_TIMEOUT",
    "build_webhook_payload",
    "deliver_webhook",
    "send_webhook_message",
    "webhook_post_start_hook",
]
