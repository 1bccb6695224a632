"""
Canary Boot — Canonical Exceptions

Este módulo define as exceções tipadas do bootstrap.

Objetivo:
- Permitir que Stages e componentes levantem erros semânticos tipados
- Facilitar o mapeamento determinístico para BootErrorPayload
- Evitar RuntimeError genéricos nos caminhos de falha do start-up

Regras:
- Exceções carregam apenas dados estruturados (serializáveis).
- Nenhuma exceção aqui termina o processo: só o coordenador faz isso.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True, eq=False)
class BootException(Exception):
    """Base class para exceções internas do bootstrap.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e legível pelo operador
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Falhas de Stage
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class ConfigurationError(BootException):
    """Configuração ausente, inválida ou com valor enumerado desconhecido."""


@dataclass(frozen=True, eq=False)
class ResourceLoadError(BootException):
    """Falha ao carregar arquivo de dados ou script."""


@dataclass(frozen=True, eq=False)
class DatabaseError(BootException):
    """Falha de conexão ou de verificação de schema do banco."""


@dataclass(frozen=True, eq=False)
class NetworkBindError(BootException):
    """Falha ao abrir um listener. Individualmente nunca é fatal."""


# ---------------------------------------------------------------------------
# Coordenação
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class NoServiceRunning(BootException):
    """Pipeline concluído sem nenhum serviço ativo no ServiceManager."""


@dataclass(frozen=True, eq=False)
class WorkerStateError(BootException):
    """Transição de ciclo de vida inválida em um Worker."""
