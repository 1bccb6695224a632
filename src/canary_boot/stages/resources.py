# src/canary_boot/stages/resources.py
"""
Stages externos: chave RSA, banco de dados, dados de jogo, mapas e rotinas
de manutenção.

Cada Stage daqui delega o trabalho real a um colaborador resolvido pelo
`CollaboratorRegistry`. Para arquivos de dados e mapas existe uma ação
padrão que só verifica a presença do recurso em `paths.data_dir`; o
conteúdo é problema do colaborador.

Invariantes:
    - A resolução do colaborador acontece na execução do Stage, depois que
      `config.load` já populou `ctx.config`
    - Sem colaborador e sem ação padrão o Stage falha
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

from canary_boot.core.exceptions import ConfigurationError, ResourceLoadError
from canary_boot.core.pipeline.stage import Stage, StageAction
from canary_boot.core.pipeline.types import StageResult, StageStatus

from .collaborators import CollaboratorRegistry

if TYPE_CHECKING:
    from canary_boot.core.context import BootContext

DEFAULT_DATA_DIR = "data"
MAP_EXTENSION = ".otbm"

RSA_KEY = "rsa.key"
DATABASE_CONNECT = "database.connect"
DATABASE_SCHEMA = "database.schema"
DATABASE_UPDATE = "database.update"
DATABASE_OPTIMIZE = "database.optimize"
CREATURES_BOOSTED = "creatures.boosted"
MAP_MAIN = "map.main"
MAP_CUSTOM = "map.custom"
HOUSES_PAY_RENT = "houses.pay_rent"
MARKET_EXPIRE_OFFERS = "market.expire_offers"
MARKET_STATISTICS = "market.statistics"

# (nome do Stage, caminho relativo a paths.data_dir)
RESOURCE_LOADS: Tuple[Tuple[str, str], ...] = (
    ("items.otb", "items/items.otb"),
    ("items.xml", "items/items.xml"),
    ("script systems", "scripts"),
    ("data/global.lua", "global.lua"),
    ("data/stages.lua", "stages.lua"),
    ("data/startup/startup.lua", "startup/startup.lua"),
    ("data/npclib/load.lua", "npclib/load.lua"),
    ("data/scripts/libs", "scripts/lib"),
    ("data/XML/vocations.xml", "XML/vocations.xml"),
    ("data/XML/events.xml", "XML/events.xml"),
    ("data/XML/outfits.xml", "XML/outfits.xml"),
    ("data/XML/familiars.xml", "XML/familiars.xml"),
    ("data/XML/imbuements.xml", "XML/imbuements.xml"),
    ("data/modules/modules.xml", "modules/modules.xml"),
    ("data/events/events.xml", "events/events.xml"),
    ("data/scripts", "scripts"),
    ("data/monster", "monster"),
    ("data/npclua", "npclua"),
)


def data_dir(ctx: "BootContext") -> Path:
    return Path(ctx.setting("paths", "data_dir", DEFAULT_DATA_DIR)).expanduser()


def require_resource(name: str, relative_path: str) -> StageAction:
    """Ação padrão: o recurso precisa existir dentro de `paths.data_dir`."""

    def _check(ctx: "BootContext") -> StageResult:
        path = data_dir(ctx) / relative_path
        if not path.exists():
            raise ResourceLoadError(
                f"Cannot load: {name}",
                details={"path": str(path)},
                hint="Verifique `paths.data_dir` na configuração",
            )
        return StageResult(stage_name=name, status=StageStatus.SUCCESS, summary=str(path))

    return _check


def _map_file(ctx: "BootContext", *parts: str) -> Path:
    return data_dir(ctx).joinpath("world", *parts)


def _require_map(name: str, path: Path) -> StageResult:
    if not path.is_file():
        raise ResourceLoadError(
            f"Failed to load map: {path.name}",
            details={"stage": name, "path": str(path)},
        )
    return StageResult(stage_name=name, status=StageStatus.SUCCESS, summary=str(path))


def default_main_map(ctx: "BootContext") -> StageResult:
    map_name = str(ctx.setting("map", "name", "canary"))
    return _require_map(MAP_MAIN, _map_file(ctx, map_name + MAP_EXTENSION))


def default_custom_map(ctx: "BootContext") -> StageResult:
    map_name = str(ctx.setting("map", "custom_name", "otservbr-custom"))
    return _require_map(MAP_CUSTOM, _map_file(ctx, "custom", map_name + MAP_EXTENSION))


def external_stage(
    name: str,
    *,
    mandatory: bool,
    collaborators: CollaboratorRegistry,
    default: Optional[StageAction] = None,
) -> Stage:
    """Stage cuja ação é resolvida no registro de colaboradores."""

    def _run(ctx: "BootContext") -> Any:
        action = collaborators.resolve(name, ctx) or default
        if action is None:
            raise ConfigurationError(
                f"Cannot load: {name}: no collaborator registered",
                details={"stage": name},
                hint=f"Registre um colaborador ou declare `collaborators.{name}` na configuração",
            )
        ctx.log(step_id=name, level="INFO", message=f"Loading {name}")
        return action(ctx)

    return Stage(name=name, mandatory=mandatory, action=_run)


def optimize_stage(collaborators: CollaboratorRegistry) -> Stage:
    """Otimização do banco: só roda com `database.optimize` e nunca é fatal."""

    def _run(ctx: "BootContext") -> StageResult:
        if not ctx.setting("database", "optimize", False):
            return stage.skipped("database.optimize disabled")

        action = collaborators.resolve(DATABASE_OPTIMIZE, ctx)
        optimized = action(ctx) if action is not None else False
        if optimized is False:
            ctx.log(step_id=DATABASE_OPTIMIZE, level="INFO", message="No tables were optimized")
            return stage.succeeded("No tables were optimized", optimized=0)
        return stage.succeeded("tables optimized", optimized=1)

    stage = Stage(name=DATABASE_OPTIMIZE, mandatory=False, action=_run)
    return stage


def custom_map_stage(collaborators: CollaboratorRegistry) -> Stage:
    """Mapa customizado: obrigatório quando habilitado, SKIPPED caso contrário."""
    load = external_stage(MAP_CUSTOM, mandatory=True, collaborators=collaborators, default=default_custom_map)

    def _run(ctx: "BootContext") -> Any:
        if not ctx.setting("map", "custom_enabled", False):
            return load.skipped("custom map disabled")
        return load.action(ctx)

    return Stage(name=MAP_CUSTOM, mandatory=True, action=_run)


def database_stages(collaborators: CollaboratorRegistry) -> List[Stage]:
    stages = [
        external_stage(RSA_KEY, mandatory=True, collaborators=collaborators),
        external_stage(DATABASE_CONNECT, mandatory=True, collaborators=collaborators),
        external_stage(DATABASE_SCHEMA, mandatory=True, collaborators=collaborators),
        external_stage(DATABASE_UPDATE, mandatory=False, collaborators=collaborators),
    ]
    stages.append(optimize_stage(collaborators))
    return stages


def resource_stages(collaborators: CollaboratorRegistry) -> List[Stage]:
    return [
        external_stage(
            name,
            mandatory=True,
            collaborators=collaborators,
            default=require_resource(name, relative_path),
        )
        for name, relative_path in RESOURCE_LOADS
    ]


def map_stages(collaborators: CollaboratorRegistry) -> List[Stage]:
    return [
        external_stage(MAP_MAIN, mandatory=True, collaborators=collaborators, default=default_main_map),
        custom_map_stage(collaborators),
    ]


def maintenance_stages(collaborators: CollaboratorRegistry) -> List[Stage]:
    return [
        external_stage(name, mandatory=False, collaborators=collaborators)
        for name in (HOUSES_PAY_RENT, MARKET_EXPIRE_OFFERS, MARKET_STATISTICS)
    ]
