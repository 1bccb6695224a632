# src/canary_boot/core/world.py
"""
Estado do servidor decidido durante o bootstrap.

Este módulo concentra os valores enumerados que o pipeline resolve a
partir da configuração e o estado mutável do servidor (`ServerState`)
que substitui o singleton global do jogo.

Assimetria preservada:
    - world type desconhecido é erro de configuração (fatal no Stage)
    - rent period desconhecido cai silenciosamente em NEVER
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .exceptions import ConfigurationError


class WorldType(str, Enum):
    PVP = "pvp"
    NO_PVP = "no-pvp"
    PVP_ENFORCED = "pvp-enforced"


class RentPeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    NEVER = "never"


class GameState(str, Enum):
    """Estados do servidor atravessados pelo bootstrap."""
    STARTUP = "startup"
    INIT = "init"
    NORMAL = "normal"


@dataclass
class ServerState:
    state: GameState = GameState.STARTUP
    world_type: Optional[WorldType] = None
    rent_period: RentPeriod = RentPeriod.NEVER

    @property
    def ready_to_serve(self) -> bool:
        return self.state is GameState.NORMAL


def _normalize(value: Any) -> str:
    return str(value if value is not None else "").strip().lower()


def resolve_world_type(value: Any) -> WorldType:
    """
    Resolve o world type configurado (case-insensitive).

    Raises:
        ConfigurationError: Para qualquer valor fora de pvp, no-pvp e pvp-enforced.
    """
    normalized = _normalize(value)
    for world_type in WorldType:
        if world_type.value == normalized:
            return world_type

    raise ConfigurationError(
        f"Unknown world type: {value}, valid world types are: pvp, no-pvp and pvp-enforced",
        details={"config_key": "server.world_type", "received": value},
        hint="Ajuste `server.world_type` na configuração",
    )


def resolve_rent_period(value: Any) -> RentPeriod:
    """Resolve o período de aluguel; valores desconhecidos viram NEVER."""
    normalized = _normalize(value)
    for period in RentPeriod:
        if period.value == normalized:
            return period
    return RentPeriod.NEVER
