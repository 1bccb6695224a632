# src/canary_boot/core/pipeline/pipeline.py
"""
Pipeline de inicialização do servidor.

Executa os Stages estritamente na ordem declarada, na thread de quem
chama `execute` (o dispatcher, no bootstrap real).

Política por Stage:
    - `stages.<nome>.enabled: false` na config → SKIPPED
    - falha em Stage obrigatório → nenhum Stage seguinte roda; o resultado
      carrega um FatalError e o handshake é sinalizado com ele
    - falha em Stage best-effort → warning logado e coletado, segue
    - sucesso → segue

Ao final sem falha fatal, o pipeline aplica os efeitos colaterais finais
(estado NORMAL, hooks pós-start) e sinaliza o handshake. Esse é o único
ponto de saída com sucesso.

O pipeline nunca termina o processo: a decisão de terminar é do
coordenador, que recebe o FatalError pelo handshake.
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Sequence

from canary_boot.core.errors import BootErrorPayload, FatalError, exception_to_error, STAGE_EXECUTION_ERROR
from canary_boot.core.handshake import Handshake
from canary_boot.core.world import GameState

from .registry import StageRegistry
from .stage import Stage
from .types import PipelineResult, StageResult, StageStatus

if TYPE_CHECKING:
    from canary_boot.core.context import BootContext

logger = logging.getLogger(__name__)

PostStartHook = Callable[["BootContext"], Any]


class InitializationPipeline:
    """Lista ordenada de Stages obrigatórios e best-effort."""

    def __init__(self, stages: Sequence[Stage], *, post_start: Sequence[PostStartHook] = ()):
        registry = StageRegistry()
        for stage in stages:
            registry.add(stage)
        self._stages = tuple(registry.list())
        self._post_start = tuple(post_start)

    @property
    def stages(self) -> Sequence[Stage]:
        return self._stages

    @property
    def post_start(self) -> Sequence[PostStartHook]:
        return self._post_start

    def _is_enabled(self, ctx: "BootContext", stage: Stage) -> bool:
        stages_cfg = (ctx.config or {}).get("stages", {}) or {}
        stage_cfg = stages_cfg.get(stage.name, {}) or {}
        return bool(stage_cfg.get("enabled", True))

    def _failed(self, stage: Stage, error: BootErrorPayload) -> StageResult:
        return StageResult(
            stage_name=stage.name,
            status=StageStatus.FAILED,
            summary=error.message,
            mandatory=stage.mandatory,
            error=error.to_dict(),
        )

    def _normalize(self, stage: Stage, raw: Any) -> StageResult:
        if isinstance(raw, StageResult):
            return raw
        if raw is None or raw is True:
            return stage.succeeded("ok")
        if raw is False:
            return self._failed(
                stage,
                BootErrorPayload(
                    type=STAGE_EXECUTION_ERROR,
                    message=f"Cannot load: {stage.name}",
                    details={"stage": stage.name},
                ),
            )
        return self._failed(
            stage,
            BootErrorPayload(
                type=STAGE_EXECUTION_ERROR,
                message="Stage action returned an invalid value",
                details={"stage": stage.name, "received": type(raw).__name__},
                hint="Ajuste a ação para retornar bool, None ou StageResult",
            ),
        )

    def _run_stage(self, ctx: "BootContext", stage: Stage) -> StageResult:
        started = time.monotonic()
        try:
            result = self._normalize(stage, stage.action(ctx))
        except (Exception, SystemExit) as e:
            # sys.exit em um colaborador vira falha do Stage
            result = self._failed(stage, exception_to_error(e))

        metrics = dict(result.metrics)
        metrics.setdefault("duration_ms", round((time.monotonic() - started) * 1000.0, 3))
        # StageResult é frozen: o enriquecimento gera uma nova instância
        return replace(result, stage_name=stage.name, mandatory=stage.mandatory, metrics=metrics)

    def _finalize(self, ctx: "BootContext") -> None:
        ctx.server.state = GameState.NORMAL
        for hook in self._post_start:
            try:
                hook(ctx)
            except Exception as e:
                ctx.log(
                    step_id="pipeline.post_start",
                    level="ERROR",
                    message=f"Post-start hook failed: {e}",
                    error=exception_to_error(e).to_dict(),
                )

    def execute(self, ctx: "BootContext", *, handshake: Optional[Handshake] = None) -> PipelineResult:
        results: List[StageResult] = []

        for stage in self._stages:
            if not self._is_enabled(ctx, stage):
                results.append(stage.skipped("skipped by config"))
                ctx.log(step_id=stage.name, level="DEBUG", message=f"Skipping {stage.name}")
                continue

            result = self._run_stage(ctx, stage)
            results.append(result)

            if not result.failed:
                continue

            if stage.mandatory:
                ctx.log(step_id=stage.name, level="ERROR", message=f"Cannot load: {stage.name}: {result.summary}", error=result.error)
                outcome = PipelineResult(
                    stages=results,
                    fatal=FatalError(
                        stage_name=stage.name,
                        message=result.summary,
                        error=BootErrorPayload(**result.error) if result.error else None,
                    ),
                )
                if handshake is not None:
                    handshake.signal(outcome)
                return outcome

            ctx.add_warning(step_id=stage.name, message=result.summary)
            ctx.log(step_id=stage.name, level="WARNING", message=result.summary, error=result.error)

        self._finalize(ctx)
        outcome = PipelineResult(stages=results)
        if handshake is not None:
            handshake.signal(outcome)
        return outcome
