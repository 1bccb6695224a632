# src/canary_boot/core/services/protocols.py
"""
Descritores de protocolo registráveis no ServiceManager.

O descritor é tudo que o bootstrap precisa saber de um protocolo: nome,
se o servidor fala primeiro (o que impede compartilhar a porta) e o
handler que recebe conexões aceitas. A implementação do protocolo em si
está fora do escopo.
"""

from __future__ import annotations

import socket
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

ConnectionHandler = Callable[[socket.socket, Tuple], None]


@dataclass(frozen=True)
class ProtocolDescriptor:
    name: str
    server_sends_first: bool = False
    handler: Optional[ConnectionHandler] = None


GAME_PROTOCOL = ProtocolDescriptor(name="gameworld protocol", server_sends_first=True)
LOGIN_PROTOCOL = ProtocolDescriptor(name="login protocol")
STATUS_PROTOCOL = ProtocolDescriptor(name="status protocol")
