"""
Canary Boot — Canonical Error Structures

Este módulo define o payload canônico de erro do bootstrap e o registro
imutável de erro fatal (`FatalError`) que o pipeline devolve ao
coordenador quando um Stage obrigatório falha.

Erros devem ser:

- explícitos
- serializáveis
- sem stack trace cru para o operador
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from .exceptions import (
    BootException,
    ConfigurationError,
    DatabaseError,
    NetworkBindError,
    NoServiceRunning,
    ResourceLoadError,
    WorkerStateError,
)


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BootErrorPayload:
    """
    Payload canônico de erro do Canary Boot.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FatalError:
    """Falha irrecuperável do bootstrap: sempre termina o processo."""

    stage_name: str
    message: str
    error: Optional[BootErrorPayload] = None


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro
# ---------------------------------------------------------------------------

CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
RESOURCE_LOAD_ERROR = "RESOURCE_LOAD_ERROR"
DATABASE_ERROR = "DATABASE_ERROR"
NETWORK_BIND_ERROR = "NETWORK_BIND_ERROR"
NO_SERVICE_RUNNING = "NO_SERVICE_RUNNING"
WORKER_STATE_ERROR = "WORKER_STATE_ERROR"
STAGE_EXECUTION_ERROR = "STAGE_EXECUTION_ERROR"
OUT_OF_MEMORY = "OUT_OF_MEMORY"

_TYPE_BY_EXCEPTION = {
    ConfigurationError: CONFIGURATION_ERROR,
    ResourceLoadError: RESOURCE_LOAD_ERROR,
    DatabaseError: DATABASE_ERROR,
    NetworkBindError: NETWORK_BIND_ERROR,
    NoServiceRunning: NO_SERVICE_RUNNING,
    WorkerStateError: WORKER_STATE_ERROR,
}


def exception_to_error(exc: BaseException) -> BootErrorPayload:
    """Converte exceções em BootErrorPayload.

    Regras:
    - BootException: já vem com message/details/hint; o tipo vem do catálogo.
    - MemoryError: OUT_OF_MEMORY.
    - SystemExit: STAGE_EXECUTION_ERROR com o código pedido.
    - Outras exceções: STAGE_EXECUTION_ERROR sem expor stack trace.
    """
    if isinstance(exc, BootException):
        error_type = STAGE_EXECUTION_ERROR
        for exc_class, code in _TYPE_BY_EXCEPTION.items():
            if isinstance(exc, exc_class):
                error_type = code
                break
        return BootErrorPayload(
            type=error_type,
            message=exc.message or "Erro durante o bootstrap",
            details=dict(exc.details or {}),
            hint=exc.hint,
        )

    if isinstance(exc, MemoryError):
        return BootErrorPayload(
            type=OUT_OF_MEMORY,
            message="Allocation failed, server out of memory",
            details={"exception_class": exc.__class__.__name__},
            hint="Decrease the size of your map or run a 64-bit interpreter",
        )

    if isinstance(exc, SystemExit):
        return BootErrorPayload(
            type=STAGE_EXECUTION_ERROR,
            message=f"Process exit requested during bootstrap (code {exc.code})",
            details={"exception_class": exc.__class__.__name__, "code": exc.code},
            hint="O encerramento do processo é decidido pelo coordenador",
        )

    return BootErrorPayload(
        type=STAGE_EXECUTION_ERROR,
        message=str(exc) or "Erro inesperado durante o bootstrap",
        details={"exception_class": exc.__class__.__name__},
        hint="Verifique o log técnico e a configuração do servidor",
    )
