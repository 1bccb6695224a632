# src/canary_boot/core/pipeline/registry.py
"""
Registro estrutural de Stages.

O `StageRegistry` valida a unicidade dos nomes e preserva a ordem de
declaração antes que o pipeline seja executado.

Invariantes:
    - Cada Stage registrado possui um nome único e não vazio
    - A lista de Stages reflete exatamente a ordem de registro
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from .stage import Stage


class DuplicateStageNameError(ValueError):
    """
    Dois Stages declarados com o mesmo nome.

    A duplicidade é tratada como erro de construção do pipeline e é
    levantada no registro, antes de qualquer execução.
    """


@dataclass
class StageRegistry:
    """Registro ordenado de Stages com nomes únicos."""

    _stages: Dict[str, Stage] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)

    def add(self, stage: Stage) -> None:
        name = getattr(stage, "name", None)
        if not isinstance(name, str) or not name.strip():
            raise ValueError("stage.name must be a non-empty string")

        if name in self._stages:
            raise DuplicateStageNameError(f"Duplicate stage name: {name}")

        self._stages[name] = stage
        self._order.append(name)

    def get(self, name: str) -> Stage:
        return self._stages[name]

    def list(self) -> List[Stage]:
        return [self._stages[name] for name in self._order]
