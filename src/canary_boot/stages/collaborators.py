# src/canary_boot/stages/collaborators.py
"""
Registro de colaboradores externos dos Stages.

Banco de dados, scripts, mapas e demais loaders são opacos para o
bootstrap: cada Stage externo só conhece o nome do colaborador que deve
chamar. A resolução segue esta precedência:

    1. colaborador registrado explicitamente (`add`)
    2. entrada `collaborators.<stage>` na configuração ("modulo:callable")
    3. ação padrão do Stage, quando existir

Sem nenhuma das três, o Stage falha com "no collaborator registered".
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from canary_boot.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from canary_boot.core.context import BootContext

Collaborator = Callable[["BootContext"], Any]


def import_entrypoint(entry_point: str) -> Collaborator:
    """
    Importa um callable declarado como "pacote.modulo:atributo".

    Raises:
        ConfigurationError: Se o formato for inválido ou o alvo não existir.
    """
    module_name, sep, attr_path = str(entry_point).partition(":")
    if not sep or not module_name or not attr_path:
        raise ConfigurationError(
            f"Invalid collaborator entry point: {entry_point}",
            details={"entry_point": entry_point},
            hint='Use o formato "pacote.modulo:funcao"',
        )

    try:
        target: Any = importlib.import_module(module_name)
        for part in attr_path.split("."):
            target = getattr(target, part)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(
            f"Cannot import collaborator {entry_point}: {e}",
            details={"entry_point": entry_point, "exception_class": e.__class__.__name__},
        ) from e

    if not callable(target):
        raise ConfigurationError(
            f"Collaborator {entry_point} is not callable",
            details={"entry_point": entry_point},
        )
    return target


@dataclass
class CollaboratorRegistry:
    _collaborators: Dict[str, Collaborator] = field(default_factory=dict, init=False, repr=False)

    def add(self, stage_name: str, collaborator: Collaborator) -> None:
        if not callable(collaborator):
            raise TypeError(f"collaborator for {stage_name} must be callable")
        self._collaborators[stage_name] = collaborator

    def has(self, stage_name: str) -> bool:
        return stage_name in self._collaborators

    def resolve(self, stage_name: str, ctx: "BootContext") -> Optional[Collaborator]:
        if stage_name in self._collaborators:
            return self._collaborators[stage_name]

        entries = (ctx.config or {}).get("collaborators") or {}
        entry_point = entries.get(stage_name) if isinstance(entries, dict) else None
        if entry_point:
            return import_entrypoint(entry_point)
        return None
