# src/canary_boot/stages/network.py
"""
Stages de abertura dos serviços de rede.

Cada protocolo do servidor é registrado no ServiceManager do contexto na
porta configurada. Os três Stages são best-effort: uma falha de bind vira
warning e o coordenador decide depois do handshake se algum serviço
ficou de pé.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from canary_boot.core.exceptions import NetworkBindError
from canary_boot.core.pipeline.stage import Stage
from canary_boot.core.pipeline.types import StageResult
from canary_boot.core.services.protocols import (
    GAME_PROTOCOL,
    LOGIN_PROTOCOL,
    STATUS_PROTOCOL,
    ProtocolDescriptor,
)

if TYPE_CHECKING:
    from canary_boot.core.context import BootContext

DEFAULT_PORTS = {
    "game": 7172,
    "login": 7171,
    "status": 7171,
}

_PROTOCOLS = (
    ("game", GAME_PROTOCOL),
    ("login", LOGIN_PROTOCOL),
    ("status", STATUS_PROTOCOL),
)


def _port(ctx: "BootContext", key: str) -> int:
    value = ctx.setting("ports", key, DEFAULT_PORTS[key])
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def service_stage(key: str, protocol: ProtocolDescriptor) -> Stage:
    name = f"services.{key}"

    def _open(ctx: "BootContext") -> StageResult:
        port = _port(ctx, key)
        host = ctx.setting("server", "bind_host", None)
        if not ctx.services.add(protocol, port, host=host):
            raise NetworkBindError(
                f"Cannot open {protocol.name} on port {port}",
                details={"protocol": protocol.name, "port": port, "host": host or ctx.services.host},
                hint=f"Verifique `ports.{key}` e se a porta já está em uso",
            )
        return stage.succeeded(f"{protocol.name} on port {port}", port=port)

    stage = Stage(name=name, mandatory=False, action=_open)
    return stage


def service_stages() -> List[Stage]:
    return [service_stage(key, protocol) for key, protocol in _PROTOCOLS]
