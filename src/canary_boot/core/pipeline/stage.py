# src/canary_boot/core/pipeline/stage.py
"""
Contrato canônico de Stage do pipeline de inicialização.

Um Stage é uma etapa nomeada do start-up: obrigatória (falha fatal) ou
best-effort (falha apenas logada). A ação recebe o BootContext e reporta
o resultado de uma destas formas:

    - None ou True        → sucesso
    - False               → falha ("Cannot load: <nome>")
    - StageResult         → resultado explícito (inclusive SKIPPED)
    - exceção levantada   → falha; BootException carrega mensagem e detalhes

Invariantes:
    - Stages são imutáveis depois de construído o pipeline
    - Stages não controlam ordem de execução nem terminam o processo
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from .types import StageResult, StageStatus

if TYPE_CHECKING:
    from canary_boot.core.context import BootContext

StageAction = Callable[["BootContext"], Any]


@dataclass(frozen=True)
class Stage:
    name: str
    mandatory: bool
    action: StageAction

    def skipped(self, summary: str) -> StageResult:
        return StageResult(
            stage_name=self.name,
            status=StageStatus.SKIPPED,
            summary=summary,
            mandatory=self.mandatory,
        )

    def succeeded(self, summary: str, **metrics: Any) -> StageResult:
        return StageResult(
            stage_name=self.name,
            status=StageStatus.SUCCESS,
            summary=summary,
            mandatory=self.mandatory,
            metrics=dict(metrics),
        )
