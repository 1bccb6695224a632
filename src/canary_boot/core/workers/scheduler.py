# src/canary_boot/core/workers/scheduler.py
"""
Scheduler baseado em timers.

Eventos agendados ficam em um heap ordenado pelo instante de disparo.
Ao vencer, o evento é entregue ao dispatcher; o scheduler nunca executa
a tarefa na própria thread.

Invariantes:
    - `add_event` devolve 0 quando o scheduler não está em RUNNING
    - Eventos cancelados via `stop_event` nunca são entregues
    - Em `request_shutdown`, eventos já vencidos ainda vão ao dispatcher;
      só os ainda não vencidos são descartados
"""

from __future__ import annotations

import heapq
import itertools
import logging
import time
from typing import Callable, List, Set, Tuple

from .dispatcher import Dispatcher
from .worker import Task, Worker, WorkerState

logger = logging.getLogger(__name__)

SCHEDULER = "scheduler"

_Event = Tuple[float, int, Task]


class Scheduler(Worker):
    """Agenda tarefas para o futuro e as repassa ao dispatcher."""

    def __init__(
        self,
        dispatcher: Dispatcher,
        name: str = SCHEDULER,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(name)
        self._dispatcher = dispatcher
        self._clock = clock
        self._events: List[_Event] = []
        self._active: Set[int] = set()
        self._ids = itertools.count(1)

    def add_event(self, delay_ms: int, task: Task) -> int:
        with self._lock:
            if self._state is not WorkerState.RUNNING:
                logger.debug("Scheduler %s is %s, event dropped", self.name, self._state.value)
                return 0
            event_id = next(self._ids)
            due = self._clock() + max(0, delay_ms) / 1000.0
            heapq.heappush(self._events, (due, event_id, task))
            self._active.add(event_id)
            self._lock.notify_all()
            return event_id

    def stop_event(self, event_id: int) -> bool:
        with self._lock:
            if event_id not in self._active:
                return False
            self._active.discard(event_id)
            return True

    def submit(self, task: Task) -> bool:
        return self.add_event(0, task) != 0

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._active)

    def _wake_for_shutdown(self) -> None:
        self._lock.notify_all()

    def _next_due(self):
        """Bloqueia até o próximo evento vencer; None quando deve encerrar."""
        with self._lock:
            while True:
                if self._state is not WorkerState.RUNNING:
                    return self._drain_due()

                if not self._events:
                    self._lock.wait()
                    continue

                due, event_id, task = self._events[0]
                if event_id not in self._active:
                    heapq.heappop(self._events)
                    continue

                remaining = due - self._clock()
                if remaining > 0:
                    self._lock.wait(remaining)
                    continue

                heapq.heappop(self._events)
                self._active.discard(event_id)
                return task

    def _drain_due(self):
        """Chamado com o lock adquirido, fora de RUNNING.

        Devolve o próximo evento já vencido; quando só restam eventos
        futuros, descarta todos e devolve None.
        """
        now = self._clock()
        while self._events:
            due, event_id, task = self._events[0]
            if event_id not in self._active:
                heapq.heappop(self._events)
                continue
            if due > now:
                break
            heapq.heappop(self._events)
            self._active.discard(event_id)
            return task

        dropped = len(self._active)
        self._events.clear()
        self._active.clear()
        if dropped:
            logger.debug("Scheduler %s discarded %d pending event(s)", self.name, dropped)
        return None

    def _run(self) -> None:
        while True:
            task = self._next_due()
            if task is None:
                break
            if not self._dispatcher.submit(task):
                logger.warning("[%s] dispatcher refused scheduled task, dropped", self.name)
