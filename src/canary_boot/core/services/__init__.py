# src/canary_boot/core/services/__init__.py
"""
# Services — Canary Boot

Listeners de rede registrados durante o pipeline e servidos pela thread
principal depois do handshake.

- **protocols**: `ProtocolDescriptor` e os protocolos canônicos do servidor
- **manager**: `ServiceManager` (add / is_running / run / stop)
"""

from .manager import DEFAULT_BIND_HOST, ServiceManager, ServicePort, bind_listener
from .protocols import GAME_PROTOCOL, LOGIN_PROTOCOL, STATUS_PROTOCOL, ProtocolDescriptor

__all__ = [
    "DEFAULT_BIND_HOST",
    "GAME_PROTOCOL",
    "LOGIN_PROTOCOL",
    "STATUS_PROTOCOL",
    "ProtocolDescriptor",
    "ServiceManager",
    "ServicePort",
    "bind_listener",
]
