# src/canary_boot/core/context.py
"""
Contexto de bootstrap compartilhado.

Este módulo define o `BootContext`, o registro explícito construído uma
única vez no start-up e passado por referência ao pipeline e às tarefas
dos Workers. Ele substitui os singletons globais do processo.

O BootContext consolida:
    - identidade do boot (run_id, created_at)
    - configuração resolvida e metadados (caminhos, hash)
    - ServiceManager e WorkerSupervisor do processo
    - estado do servidor (`ServerState`)
    - log estruturado de eventos e warnings por Stage
    - store de artefatos entre Stages

Invariantes:
    - Logs sempre incluem `run_id` e `step_id`
    - Warnings são agrupados por nome de Stage
    - Cada evento estruturado também é emitido no logger padrão

Limites explícitos:
    - Não executa Stages
    - Não decide terminação do processo
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .services.manager import ServiceManager
from .workers.supervisor import WorkerSupervisor
from .world import ServerState

logger = logging.getLogger("canary_boot")

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass
class BootContext:
    run_id: str
    created_at: datetime
    config: Dict[str, Any] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)

    services: ServiceManager = field(default_factory=ServiceManager)
    workers: WorkerSupervisor = field(default_factory=WorkerSupervisor.standard)
    server: ServerState = field(default_factory=ServerState)

    _artifacts: Dict[str, Any] = field(default_factory=dict, init=False, repr=False)
    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    @classmethod
    def create(
        cls,
        *,
        config_path: Optional[str] = None,
        local_config_path: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
        services: Optional[ServiceManager] = None,
        workers: Optional[WorkerSupervisor] = None,
    ) -> "BootContext":
        meta: Dict[str, Any] = {}
        if config_path is not None:
            meta["config_path"] = config_path
        if local_config_path is not None:
            meta["local_config_path"] = local_config_path

        return cls(
            run_id=f"boot-{uuid.uuid4().hex[:12]}",
            created_at=datetime.now(timezone.utc),
            config=dict(config or {}),
            meta=meta,
            services=services or ServiceManager(),
            workers=workers or WorkerSupervisor.standard(),
        )

    # -----------------------------
    # Config
    # -----------------------------
    def setting(self, section: str, key: str, default: Any = None) -> Any:
        values = (self.config or {}).get(section) or {}
        if not isinstance(values, dict):
            return default
        value = values.get(key, default)
        return default if value is None else value

    # -----------------------------
    # Artifact store
    # -----------------------------
    def set_artifact(self, key: str, value: Any) -> None:
        self._artifacts[key] = value

    def has_artifact(self, key: str) -> bool:
        return key in self._artifacts

    def get_artifact(self, key: str) -> Any:
        if key not in self._artifacts:
            raise KeyError(key)
        return self._artifacts[key]

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, step_id: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "step_id": step_id,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)
        logger.log(_LEVELS.get(level.upper(), logging.INFO), message)

    def add_warning(self, *, step_id: str, message: str) -> None:
        if step_id not in self.warnings:
            self.warnings[step_id] = []
        self.warnings[step_id].append(message)
