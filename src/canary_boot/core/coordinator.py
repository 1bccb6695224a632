# src/canary_boot/core/coordinator.py
"""
Coordenador do bootstrap do processo.

Máquina de estados:

    IDLE → WORKERS_STARTING → PIPELINE_RUNNING → DECIDED → (SERVING | SHUTTING_DOWN) → TERMINATED

Responsabilidades:
    - iniciar todos os Workers antes de submeter o pipeline
    - submeter o pipeline como uma única tarefa ao dispatcher
    - bloquear a thread principal no handshake (único ponto de bloqueio)
    - decidir entre servir, desligar em ordem ou escalar erro fatal

Decisões arquiteturais:
    - Toda terminação do processo acontece aqui; Stages só devolvem resultados
    - O ServiceManager só é inspecionado depois do handshake
    - "Nenhum serviço ativo" não é fatal-crash: desliga os Workers em ordem
      e devolve código de saída não zero

Limites explícitos:
    - Não há timeout no handshake: um Stage obrigatório travado bloqueia o start-up
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import List, NoReturn, Optional

from .context import BootContext
from .errors import FatalError, exception_to_error
from .escalation import EXIT_FAILURE, EXIT_SUCCESS, ErrorEscalation
from .exceptions import NoServiceRunning, WorkerStateError
from .handshake import Handshake
from .pipeline.pipeline import InitializationPipeline
from .pipeline.types import PipelineResult

logger = logging.getLogger(__name__)

COORDINATOR_STEP = "coordinator"


class CoordinatorState(str, Enum):
    IDLE = "idle"
    WORKERS_STARTING = "workers_starting"
    PIPELINE_RUNNING = "pipeline_running"
    DECIDED = "decided"
    SERVING = "serving"
    SHUTTING_DOWN = "shutting_down"
    TERMINATED = "terminated"


class BootstrapCoordinator:
    def __init__(
        self,
        *,
        ctx: BootContext,
        pipeline: InitializationPipeline,
        escalation: Optional[ErrorEscalation] = None,
    ):
        self.ctx = ctx
        self.pipeline = pipeline
        self.escalation = escalation or ErrorEscalation()
        self.handshake = Handshake()
        self.result: Optional[PipelineResult] = None
        self._state = CoordinatorState.IDLE
        self._history: List[CoordinatorState] = [CoordinatorState.IDLE]
        self._lock = threading.Lock()

    @property
    def state(self) -> CoordinatorState:
        with self._lock:
            return self._state

    @property
    def history(self) -> List[CoordinatorState]:
        with self._lock:
            return list(self._history)

    def _transition(self, state: CoordinatorState) -> None:
        with self._lock:
            self._state = state
            self._history.append(state)
        logger.debug("Bootstrap state: %s", state.value)

    def _abort(self, fatal: FatalError) -> NoReturn:
        self.ctx.log(
            step_id=fatal.stage_name,
            level="CRITICAL",
            message=f"Fatal error: {fatal.message}",
            error=fatal.error.to_dict() if fatal.error else None,
        )
        self.ctx.workers.request_shutdown_all()
        self._transition(CoordinatorState.TERMINATED)
        self.escalation.escalate(fatal)

    def _run_pipeline(self) -> None:
        try:
            self.pipeline.execute(self.ctx, handshake=self.handshake)
        except BaseException as e:
            # o handshake precisa disparar mesmo se o pipeline quebrar fora de um Stage
            error = exception_to_error(e)
            self.handshake.signal(
                PipelineResult(fatal=FatalError(stage_name="pipeline", message=error.message, error=error))
            )
            raise

    def run(self) -> int:
        if self.state is not CoordinatorState.IDLE:
            raise RuntimeError("BootstrapCoordinator.run() can only be called once")

        self._transition(CoordinatorState.WORKERS_STARTING)
        try:
            self.ctx.workers.start_all()
        except WorkerStateError as e:
            self._abort(FatalError(stage_name="workers.start", message=e.message, error=exception_to_error(e)))

        self._transition(CoordinatorState.PIPELINE_RUNNING)
        dispatcher = self.ctx.workers.dispatcher
        if dispatcher is None or not dispatcher.submit(self._run_pipeline):
            self._abort(
                FatalError(
                    stage_name="pipeline.submit",
                    message="Dispatcher refused the initialization pipeline",
                )
            )

        outcome = self.handshake.wait()
        self.result = outcome
        self._transition(CoordinatorState.DECIDED)

        if outcome is not None and outcome.fatal is not None:
            self._abort(outcome.fatal)

        if self.ctx.services.is_running():
            self._transition(CoordinatorState.SERVING)
            server_name = self.ctx.setting("server", "name", "Canary")
            self.ctx.log(step_id=COORDINATOR_STEP, level="INFO", message=f"{server_name} server online!")
            self.ctx.services.run()
            self.ctx.workers.shutdown()
            self._transition(CoordinatorState.TERMINATED)
            return EXIT_SUCCESS

        self._transition(CoordinatorState.SHUTTING_DOWN)
        error = exception_to_error(
            NoServiceRunning(
                "No services running. The server is NOT online!",
                details={"services": []},
            )
        )
        self.ctx.log(step_id=COORDINATOR_STEP, level="ERROR", message=error.message, error=error.to_dict())
        self.ctx.workers.shutdown()
        self._transition(CoordinatorState.TERMINATED)
        return EXIT_FAILURE
