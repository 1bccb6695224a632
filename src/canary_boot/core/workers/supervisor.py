# src/canary_boot/core/workers/supervisor.py
"""
Supervisor dos Workers do processo.

O supervisor é o único dono dos Workers: os demais componentes apenas
submetem tarefas. A ordem de desligamento é declarada uma vez, como dado,
em vez de chamadas `join` espalhadas pelo código.

Decisões arquiteturais:
    - Workers são iniciados na ordem de registro
    - O desligamento percorre `shutdown_order`: para cada Worker,
      `request_shutdown()` seguido de `join()`, antes de passar ao próximo
    - O scheduler vem primeiro porque alimenta os demais; o dispatcher
      por último, depois de drenar o que os outros ainda entregaram

Invariantes:
    - Cada Worker possui um nome único
    - Workers fora de `shutdown_order` são desligados depois dos listados,
      na ordem de registro
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .dispatcher import DATABASE_TASKS, DISPATCHER, DatabaseTasks, Dispatcher
from .scheduler import SCHEDULER, Scheduler
from .worker import Worker

logger = logging.getLogger(__name__)

DEFAULT_SHUTDOWN_ORDER: Tuple[str, ...] = (SCHEDULER, DATABASE_TASKS, DISPATCHER)


class DuplicateWorkerNameError(ValueError):
    """Dois Workers registrados com o mesmo nome."""


@dataclass
class WorkerSupervisor:
    """Lista nomeada de Workers com contrato uniforme de ciclo de vida."""

    shutdown_order: Sequence[str] = DEFAULT_SHUTDOWN_ORDER

    _workers: Dict[str, Worker] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)

    @classmethod
    def standard(cls) -> "WorkerSupervisor":
        """Dispatcher, scheduler e database tasks, nessa ordem de start."""
        supervisor = cls()
        dispatcher = Dispatcher()
        supervisor.add(dispatcher)
        supervisor.add(Scheduler(dispatcher))
        supervisor.add(DatabaseTasks(dispatcher))
        return supervisor

    def add(self, worker: Worker) -> None:
        if worker.name in self._workers:
            raise DuplicateWorkerNameError(f"Duplicate worker name: {worker.name}")
        self._workers[worker.name] = worker
        self._order.append(worker.name)

    def get(self, name: str) -> Worker:
        return self._workers[name]

    def has(self, name: str) -> bool:
        return name in self._workers

    def list(self) -> List[Worker]:
        return [self._workers[name] for name in self._order]

    @property
    def dispatcher(self) -> Optional[Worker]:
        return self._workers.get(DISPATCHER)

    def _ordered_for_shutdown(self) -> List[Worker]:
        names = [n for n in self.shutdown_order if n in self._workers]
        names += [n for n in self._order if n not in names]
        return [self._workers[n] for n in names]

    def start_all(self) -> None:
        for worker in self.list():
            worker.start()

    def request_shutdown_all(self) -> None:
        for worker in self._ordered_for_shutdown():
            worker.request_shutdown()

    def shutdown(self, timeout: Optional[float] = None) -> None:
        for worker in self._ordered_for_shutdown():
            worker.request_shutdown()
            worker.join(timeout)
            logger.debug("Worker %s joined (%s)", worker.name, worker.state.value)
