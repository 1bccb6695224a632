# src/canary_boot/core/escalation.py
"""
Único caminho de erro fatal do bootstrap.

Todo erro fatal termina o processo depois de um aviso visível ao operador.
No modo interativo (padrão), o processo espera uma tecla Enter antes de
sair, para que quem abriu o binário com duplo clique consiga ler o erro.

Invariantes:
    - `escalate` nunca retorna: sempre levanta SystemExit(EXIT_FAILURE)
    - O modo não interativo só pula a leitura da tecla
"""

from __future__ import annotations

import logging
import sys
from typing import NoReturn, Optional, TextIO

from .errors import FatalError

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = -1

CLOSE_NOTICE = "The program will close after pressing the enter key..."


class ErrorEscalation:
    def __init__(self, *, interactive: bool = True, stdin: Optional[TextIO] = None):
        self.interactive = interactive
        self._stdin = stdin

    def escalate(self, fatal: FatalError) -> NoReturn:
        logger.error("[%s] %s", fatal.stage_name, fatal.message)
        if fatal.error is not None and fatal.error.hint:
            logger.error("Hint: %s", fatal.error.hint)

        if self.interactive:
            logger.error(CLOSE_NOTICE)
            (self._stdin or sys.stdin).readline()

        raise SystemExit(EXIT_FAILURE)
