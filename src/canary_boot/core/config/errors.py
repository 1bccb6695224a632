# src/canary_boot/core/config/errors.py
"""
Exceções canônicas da camada de configuração do Canary Boot.

As exceções aqui definidas representam violações estruturais de
configuração detectadas durante load e merge. O Stage `config.load`
converte qualquer uma delas em `ConfigurationError`, que é fatal.

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção representa erro de Stage ou de rede
"""


class ConfigError(Exception):
    """Exceção base para erros de carregamento e resolução de configuração."""


class DefaultsNotFoundError(ConfigError):
    """
    O arquivo de configuração base (defaults) não existe.

    Decisões arquiteturais:
        - O arquivo de defaults é obrigatório
        - Sem defaults não existe configuração efetiva válida
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Extensão de arquivo de configuração não suportada.

    Formatos suportados:
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """O conteúdo raiz da configuração não é um dicionário."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"ports": {"game": 7172}}
        - override: {"ports": "7172"}

    Nenhum merge parcial é produzido em caso de conflito.
    """
