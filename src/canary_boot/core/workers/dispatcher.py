# src/canary_boot/core/workers/dispatcher.py
"""Especializações de Worker: dispatcher de tarefas imediatas e fila de I/O."""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Callable, Optional

from .worker import Task, Worker

logger = logging.getLogger(__name__)

DISPATCHER = "dispatcher"
DATABASE_TASKS = "database"


class Dispatcher(Worker):
    """Executa tarefas imediatas na ordem de chegada."""

    def __init__(self, name: str = DISPATCHER):
        super().__init__(name)

    def add_task(self, task: Task) -> bool:
        return self.submit(task)


class DatabaseTasks(Worker):
    """
    Fila de tarefas de I/O assíncrono.

    A consulta roda na thread deste Worker; o callback com o resultado é
    entregue ao dispatcher, para que o estado do jogo só seja tocado lá.
    """

    def __init__(self, dispatcher: Dispatcher, name: str = DATABASE_TASKS):
        super().__init__(name)
        self._dispatcher = dispatcher

    def add_task(
        self,
        query: Callable[[], Any],
        callback: Optional[Callable[[Any], Any]] = None,
    ) -> bool:
        return self.submit(partial(self._run_query, query, callback))

    def _run_query(
        self,
        query: Callable[[], Any],
        callback: Optional[Callable[[Any], Any]],
    ) -> None:
        result = query()
        if callback is None:
            return
        if not self._dispatcher.submit(partial(callback, result)):
            logger.warning("[%s] dispatcher refused callback, result dropped", self.name)
