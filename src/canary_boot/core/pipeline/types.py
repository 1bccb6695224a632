# src/canary_boot/core/pipeline/types.py
"""
Tipos canônicos do pipeline de inicialização.

Componentes principais:
    - StageStatus    → enum de estados finais (SUCCESS, SKIPPED, FAILED)
    - StageResult    → resultado imutável de um Stage
    - PipelineResult → resultado agregado, com o FatalError quando houver

Invariantes:
    - Enums possuem valores textuais canônicos
    - StageResult e PipelineResult são imutáveis
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from canary_boot.core.errors import FatalError


class StageStatus(str, Enum):
    """
    Estados finais possíveis da execução de um Stage.

    Estados definidos:
        - SUCCESS: execução concluída com sucesso
        - SKIPPED: Stage pulado por decisão explícita (config ou condição)
        - FAILED: ação reportou falha ou levantou exceção

    O status é um valor final; estados intermediários não pertencem a este enum.
    """
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class StageResult:
    """
    Resultado imutável da execução de um Stage.

    Campos:
        - stage_name: nome único do Stage
        - status: estado final
        - summary: resumo textual
        - mandatory: se a falha do Stage é fatal
        - metrics: valores numéricos produzidos pelo Stage
        - error: payload de erro serializado (apenas em FAILED)
    """
    stage_name: str
    status: StageStatus
    summary: str
    mandatory: bool = False
    metrics: Dict[str, Any] = field(default_factory=dict)
    error: Optional[Dict[str, Any]] = None

    @property
    def failed(self) -> bool:
        return self.status is StageStatus.FAILED


@dataclass(frozen=True)
class PipelineResult:
    """Resultado agregado do pipeline, na ordem de execução dos Stages."""

    stages: List[StageResult] = field(default_factory=list)
    fatal: Optional[FatalError] = None

    @property
    def succeeded(self) -> bool:
        return self.fatal is None

    def executed(self) -> List[str]:
        return [r.stage_name for r in self.stages if r.status is not StageStatus.SKIPPED]

    def get(self, stage_name: str) -> StageResult:
        for result in self.stages:
            if result.stage_name == stage_name:
                return result
        raise KeyError(stage_name)
