# src/canary_boot/core/handshake.py
"""
Handshake de sinal único entre o pipeline de inicialização e a thread principal.

A thread principal bloqueia em `wait()` enquanto o pipeline roda no
dispatcher; o pipeline chama `signal()` exatamente uma vez ao terminar,
entregando o resultado da inicialização.

Invariantes:
    - Apenas o primeiro `signal()` tem efeito; os demais são no-ops
    - A flag é autoritativa: um `wait()` após o sinal retorna imediatamente
    - Um `wait()` antes do sinal bloqueia até ele acontecer
    - O handshake não é reutilizado após o bootstrap

Limites explícitos:
    - Não implementa timeout no caminho do bootstrap: um Stage obrigatório
      travado bloqueia o start-up indefinidamente
"""

from __future__ import annotations

import threading
from typing import Any, Optional


class Handshake:
    """Primitiva de sinal único com estado consultável e resultado associado."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._signaled = False
        self._outcome: Any = None

    @property
    def is_signaled(self) -> bool:
        with self._cond:
            return self._signaled

    def signal(self, outcome: Any = None) -> bool:
        """Dispara o sinal. Retorna False se ele já tinha sido disparado."""
        with self._cond:
            if self._signaled:
                return False
            self._outcome = outcome
            self._signaled = True
            self._cond.notify_all()
            return True

    def wait(self, timeout: Optional[float] = None) -> Any:
        """
        Bloqueia até o sinal e devolve o resultado entregue em `signal()`.

        `timeout` existe apenas para testes; expirar levanta TimeoutError.
        """
        with self._cond:
            if not self._cond.wait_for(lambda: self._signaled, timeout=timeout):
                raise TimeoutError("handshake not signaled")
            return self._outcome
