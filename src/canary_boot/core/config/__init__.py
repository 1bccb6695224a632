# src/canary_boot/core/config/__init__.py
"""
Camada de configuração do Canary Boot.

Este pacote carrega, mescla e identifica a configuração do servidor
antes que qualquer Stage dependente dela seja executado.

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Cópia do arquivo `.dist` quando o arquivo local ainda não existe
    - Resolução da configuração final via deep-merge determinístico
    - Geração de hash canônico para rastreabilidade do boot

Limites explícitos:
    - Não valida semântica de jogo (world type, rent period vivem em core.world)
    - Não executa o pipeline
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_config_hash
from .loader import ensure_local_config, load_config
from .merge import deep_merge

__all__ = [
    "ConfigError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "InvalidConfigRootTypeError",
    "UnsupportedConfigFormatError",
    "compute_config_hash",
    "deep_merge",
    "ensure_local_config",
    "load_config",
]
