# src/canary_boot/core/workers/worker.py
"""
Worker nomeado com fila de tarefas e thread própria.

Um Worker executa tarefas (callables sem argumentos) estritamente na sua
própria thread, nunca inline na thread de quem submeteu.

Ciclo de vida:
    STOPPED --start()--> RUNNING --request_shutdown()--> DRAINING --join()--> STOPPED

Invariantes:
    - `submit` só aceita tarefas em RUNNING; fora disso a tarefa é descartada
    - Em DRAINING, as tarefas já enfileiradas rodam até o fim
    - `join` só é válido depois de `request_shutdown`
    - Uma tarefa que levanta exceção (inclusive SystemExit) é logada e o
      Worker segue rodando
"""

from __future__ import annotations

import logging
import queue
import threading
from enum import Enum
from typing import Any, Callable, Optional

from canary_boot.core.exceptions import WorkerStateError

logger = logging.getLogger(__name__)

Task = Callable[[], Any]

SENTINEL = object()


class WorkerState(str, Enum):
    """Estados do ciclo de vida de um Worker."""
    STOPPED = "stopped"
    RUNNING = "running"
    DRAINING = "draining"


class Worker:
    """Executor genérico em background com ciclo start/request_shutdown/join."""

    def __init__(self, name: str):
        if not isinstance(name, str) or not name.strip():
            raise ValueError("worker name must be a non-empty string")
        self.name = name
        self._lock = threading.Condition()
        self._state = WorkerState.STOPPED
        self._tasks: "queue.Queue[Any]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, state={self.state.value})"

    @property
    def state(self) -> WorkerState:
        with self._lock:
            return self._state

    # -----------------------------
    # Ciclo de vida
    # -----------------------------
    def start(self) -> None:
        with self._lock:
            if self._state is not WorkerState.STOPPED:
                raise WorkerStateError(
                    f"Worker {self.name} is already {self._state.value}",
                    details={"worker": self.name, "state": self._state.value},
                )
            self._tasks = queue.Queue()
            self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
            self._state = WorkerState.RUNNING
            self._thread.start()
        logger.debug("Worker %s started", self.name)

    def submit(self, task: Task) -> bool:
        with self._lock:
            if self._state is not WorkerState.RUNNING:
                logger.debug("Worker %s is %s, task dropped", self.name, self._state.value)
                return False
            self._enqueue(task)
            return True

    def request_shutdown(self) -> None:
        with self._lock:
            if self._state is not WorkerState.RUNNING:
                return
            self._state = WorkerState.DRAINING
            self._wake_for_shutdown()
        logger.debug("Worker %s draining", self.name)

    def join(self, timeout: Optional[float] = None) -> None:
        with self._lock:
            if self._state is WorkerState.RUNNING:
                raise WorkerStateError(
                    f"Worker {self.name} must be asked to shut down before join",
                    details={"worker": self.name, "state": self._state.value},
                )
            thread = self._thread

        if thread is None:
            return

        thread.join(timeout)
        if thread.is_alive():
            return

        with self._lock:
            if self._thread is thread:
                self._state = WorkerState.STOPPED
        logger.debug("Worker %s stopped", self.name)

    # -----------------------------
    # Hooks para especializações
    # -----------------------------
    def _enqueue(self, task: Task) -> None:
        """Chamado com o lock adquirido."""
        self._tasks.put(task)

    def _wake_for_shutdown(self) -> None:
        """Chamado com o lock adquirido, depois da transição para DRAINING."""
        self._tasks.put(SENTINEL)

    def _run(self) -> None:
        while True:
            task = self._tasks.get()
            if task is SENTINEL:
                break
            self._execute(task)

    def _execute(self, task: Task) -> None:
        try:
            task()
        except (Exception, SystemExit):
            logger.exception("[%s] task failed", self.name)
