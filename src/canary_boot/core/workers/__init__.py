# src/canary_boot/core/workers/__init__.py
"""
# Workers — Canary Boot

Executores nomeados em background, um por thread de sistema, todos com o
mesmo contrato de ciclo de vida.

## Componentes

- **worker**: `Worker`, `WorkerState`
- **dispatcher**: `Dispatcher` (tarefas imediatas), `DatabaseTasks` (I/O)
- **scheduler**: `Scheduler` (timers que entregam ao dispatcher)
- **supervisor**: `WorkerSupervisor` (start em ordem, shutdown em ordem declarada)
"""

from .dispatcher import DATABASE_TASKS, DISPATCHER, DatabaseTasks, Dispatcher
from .scheduler import SCHEDULER, Scheduler
from .supervisor import DEFAULT_SHUTDOWN_ORDER, DuplicateWorkerNameError, WorkerSupervisor
from .worker import Worker, WorkerState

__all__ = [
    "DATABASE_TASKS",
    "DEFAULT_SHUTDOWN_ORDER",
    "DISPATCHER",
    "DatabaseTasks",
    "Dispatcher",
    "DuplicateWorkerNameError",
    "SCHEDULER",
    "Scheduler",
    "Worker",
    "WorkerState",
    "WorkerSupervisor",
]
