# src/canary_boot/stages/settings.py
"""
Stages de configuração e de estado do mundo.

Responsabilidades:
    - materializar o arquivo local a partir do `.dist` (best-effort)
    - carregar defaults + overrides e registrar o hash da configuração
    - resolver world type (obrigatório) e rent period (nunca falha)
    - mover o servidor para o estado INIT antes de abrir os serviços

Limites explícitos:
    - Não abre sockets
    - Não carrega dados de jogo
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from canary_boot.core.config import ConfigError, compute_config_hash, ensure_local_config, load_config
from canary_boot.core.exceptions import ConfigurationError
from canary_boot.core.pipeline.stage import Stage
from canary_boot.core.pipeline.types import StageResult
from canary_boot.core.world import GameState, resolve_rent_period, resolve_world_type

if TYPE_CHECKING:
    from canary_boot.core.context import BootContext

CONFIG_DIST_COPY = "config.dist_copy"
CONFIG_LOAD = "config.load"
WORLD_TYPE = "world.type"
GAME_INIT_STATE = "game.init_state"
HOUSES_RENT_PERIOD = "houses.rent_period"


def copy_dist_config(ctx: "BootContext") -> StageResult:
    stage = dist_copy_stage()
    local_path = ctx.meta.get("local_config_path")
    if not local_path:
        return stage.skipped("no local config path")

    copied = ensure_local_config(local_path)
    return stage.succeeded("copied from .dist" if copied else "nothing to copy", copied=int(copied))


def load_settings(ctx: "BootContext") -> StageResult:
    """
    Carrega a configuração efetiva para `ctx.config`.

    Sem `config_path` em `ctx.meta`, a configuração já presente no contexto
    é mantida (boot montado em memória). Em ambos os casos o hash é
    registrado em `ctx.meta["config_hash"]`.
    """
    stage = load_stage()
    config_path = ctx.meta.get("config_path")

    if config_path:
        try:
            ctx.config = load_config(
                defaults_path=config_path,
                local_path=ctx.meta.get("local_config_path"),
            )
        except ConfigError as e:
            raise ConfigurationError(
                f"Cannot load config: {e}",
                details={"config_path": config_path, "exception_class": e.__class__.__name__},
                hint="Verifique o caminho e o formato do arquivo de configuração",
            ) from e
        source = "file"
    else:
        source = "memory"

    ctx.meta["config_hash"] = compute_config_hash(ctx.config)
    return stage.succeeded(f"config loaded from {source}", keys=len(ctx.config))


def apply_world_type(ctx: "BootContext") -> StageResult:
    world_type = resolve_world_type(ctx.setting("server", "world_type", "pvp"))
    ctx.server.world_type = world_type
    ctx.log(step_id=WORLD_TYPE, level="INFO", message=f"World type set as {world_type.value.upper()}")
    return world_type_stage().succeeded(world_type.value)


def enter_init_state(ctx: "BootContext") -> None:
    ctx.server.state = GameState.INIT


def apply_rent_period(ctx: "BootContext") -> StageResult:
    rent_period = resolve_rent_period(ctx.setting("server", "house_rent_period", "never"))
    ctx.server.rent_period = rent_period
    return rent_period_stage().succeeded(rent_period.value)


def dist_copy_stage() -> Stage:
    return Stage(name=CONFIG_DIST_COPY, mandatory=False, action=copy_dist_config)


def load_stage() -> Stage:
    return Stage(name=CONFIG_LOAD, mandatory=True, action=load_settings)


def world_type_stage() -> Stage:
    return Stage(name=WORLD_TYPE, mandatory=True, action=apply_world_type)


def init_state_stage() -> Stage:
    return Stage(name=GAME_INIT_STATE, mandatory=False, action=enter_init_state)


def rent_period_stage() -> Stage:
    return Stage(name=HOUSES_RENT_PERIOD, mandatory=False, action=apply_rent_period)
