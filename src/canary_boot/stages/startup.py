# src/canary_boot/stages/startup.py
"""
Montagem do pipeline canônico de start-up do servidor.

A ordem declarada aqui é a ordem de execução. Stages obrigatórios
interrompem o start-up; os demais só geram warning.
"""

from __future__ import annotations

import os
import platform
import sys
from typing import TYPE_CHECKING, List, Optional

from canary_boot import SERVER_DEVELOPERS, SERVER_NAME, __version__
from canary_boot.core.pipeline.pipeline import InitializationPipeline
from canary_boot.core.pipeline.stage import Stage
from canary_boot.core.pipeline.types import StageResult
from canary_boot.notifications.webhook import webhook_post_start_hook

from . import settings
from .collaborators import CollaboratorRegistry
from .network import service_stages
from .resources import (
    CREATURES_BOOSTED,
    database_stages,
    external_stage,
    maintenance_stages,
    map_stages,
    resource_stages,
)

if TYPE_CHECKING:
    from canary_boot.core.context import BootContext

BANNER = "startup.banner"
ROOT_CHECK = "startup.root_check"


def show_banner(ctx: "BootContext") -> None:
    ctx.log(step_id=BANNER, level="INFO", message=f"{SERVER_NAME} - Version {__version__}")
    ctx.log(
        step_id=BANNER,
        level="INFO",
        message=f"Running on {platform.python_implementation()} {platform.python_version()} for platform {sys.platform}",
    )
    ctx.log(step_id=BANNER, level="INFO", message=f"A server developed by: {SERVER_DEVELOPERS}")


def _running_as_root() -> bool:
    if not hasattr(os, "geteuid"):
        return False
    return os.getuid() == 0 or os.geteuid() == 0


def check_root_user(ctx: "BootContext") -> StageResult:
    stage = Stage(name=ROOT_CHECK, mandatory=False, action=check_root_user)
    if not _running_as_root():
        return stage.succeeded("not running as root")

    message = (
        f"{SERVER_NAME} has been executed as root user, "
        "please consider running it as a normal user"
    )
    ctx.add_warning(step_id=ROOT_CHECK, message=message)
    ctx.log(step_id=ROOT_CHECK, level="WARNING", message=message)
    return stage.succeeded("running as root")


def startup_stages(collaborators: CollaboratorRegistry) -> List[Stage]:
    stages: List[Stage] = [
        Stage(name=BANNER, mandatory=False, action=show_banner),
        settings.dist_copy_stage(),
        settings.load_stage(),
    ]
    stages += database_stages(collaborators)
    stages += resource_stages(collaborators)
    stages.append(external_stage(CREATURES_BOOSTED, mandatory=False, collaborators=collaborators))
    stages.append(settings.world_type_stage())
    stages += map_stages(collaborators)
    stages.append(settings.init_state_stage())
    stages += service_stages()
    stages.append(settings.rent_period_stage())
    stages += maintenance_stages(collaborators)
    stages.append(Stage(name=ROOT_CHECK, mandatory=False, action=check_root_user))
    return stages


def build_startup_pipeline(collaborators: Optional[CollaboratorRegistry] = None) -> InitializationPipeline:
    """
    Constrói o pipeline completo do start-up.

    Args:
        collaborators: Registro de colaboradores externos. Sem registro, só
            as entradas `collaborators.<stage>` da configuração e as ações
            padrão dos Stages são usadas.
    """
    registry = collaborators or CollaboratorRegistry()
    return InitializationPipeline(
        startup_stages(registry),
        post_start=(webhook_post_start_hook,),
    )
