# src/canary_boot/core/pipeline/__init__.py
"""
# Pipeline Core — Canary Boot

Contratos e execução do pipeline de inicialização.

## Componentes

- **types**: `StageStatus`, `StageResult`, `PipelineResult`
- **stage**: `Stage` (nome, obrigatório, ação)
- **registry**: `StageRegistry` (unicidade de nome, ordem de declaração)
- **pipeline**: `InitializationPipeline.execute(ctx, handshake=...)`

## Invariantes

- A ordem dos Stages é total e determinística
- Dois Stages nunca rodam ao mesmo tempo
- O handshake é sinalizado exatamente uma vez por execução
"""

from .pipeline import InitializationPipeline, PostStartHook
from .registry import DuplicateStageNameError, StageRegistry
from .stage import Stage, StageAction
from .types import PipelineResult, StageResult, StageStatus

__all__ = [
    "DuplicateStageNameError",
    "InitializationPipeline",
    "PipelineResult",
    "PostStartHook",
    "Stage",
    "StageAction",
    "StageRegistry",
    "StageResult",
    "StageStatus",
]
