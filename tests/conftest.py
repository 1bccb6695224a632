# tests/conftest.py
"""
Fixtures compartilhados para testes do Canary Boot.

Este módulo define fixtures reutilizáveis que fornecem:
- configurações mínimas e determinísticas
- binders de socket controlados (porta efêmera ou falha forçada)
- contexto de bootstrap isolado (BootContext)
- escalonamento de erro fatal sem leitura de stdin

Decisões arquiteturais:
    - Sockets reais são abertos apenas em 127.0.0.1 e porta efêmera
    - Imports do core são realizados de forma lazy para
      melhorar a clareza de erros durante falhas
    - Todo Worker iniciado por um teste é desligado no teardown

Invariantes:
    - Nenhuma fixture executa o pipeline real
    - Nenhuma fixture encerra o processo

Limites explícitos:
    - Não substituir testes de integração (tests/e2e)
"""

import socket
from datetime import datetime, timezone

import pytest


# =====================================================
# Config fixtures
# =====================================================

@pytest.fixture
def canary_defaults_yaml() -> str:
    """
    YAML de defaults semelhante ao arquivo de configuração real do servidor.

    Returns:
        str: Conteúdo YAML com a base completa da configuração.
    """
    return """\
server:
  name: Canary
  world_type: pvp
  house_rent_period: never
ports:
  game: 7172
  login: 7171
  status: 7171
map:
  name: canary
  custom_enabled: false
stages:
  rsa.key:
    enabled: true
"""


@pytest.fixture
def canary_local_yaml() -> str:
    """YAML de overrides locais (apenas o que muda)."""
    return """\
server:
  world_type: no-pvp
stages:
  rsa.key:
    enabled: false
"""


@pytest.fixture
def boot_config() -> dict:
    """
    Configuração mínima e já resolvida para montar um BootContext.

    Os valores de porta são lógicos: os binders de teste ignoram a porta
    pedida e abrem uma porta efêmera.
    """
    return {
        "server": {
            "name": "Canary",
            "world_type": "pvp",
            "house_rent_period": "weekly",
            "bind_host": "127.0.0.1",
        },
        "ports": {"game": 7172, "login": 7171, "status": 7171},
        "map": {"name": "canary", "custom_enabled": False},
    }


# =====================================================
# Network fixtures
# =====================================================

@pytest.fixture
def ephemeral_binder():
    """
    Binder que abre um listener real em 127.0.0.1 numa porta efêmera.

    A porta pedida é registrada em `binder.requested` para asserts.
    """
    opened = []

    def _bind(host, port):
        listener = socket.create_server(("127.0.0.1", 0))
        listener.setblocking(False)
        opened.append(listener)
        _bind.requested.append((host, port))
        return listener

    _bind.requested = []
    yield _bind

    for listener in opened:
        listener.close()


@pytest.fixture
def failing_binder():
    """Binder que sempre falha como uma porta já ocupada."""
    calls = []

    def _bind(host, port):
        calls.append((host, port))
        raise OSError(98, "Address already in use")

    _bind.calls = calls
    return _bind


# =====================================================
# Boot context fixtures
# =====================================================

@pytest.fixture
def make_ctx(boot_config, ephemeral_binder):
    """
    Factory de BootContext isolado.

    Args (da factory):
        config: sobrescreve `boot_config` quando informado.
        binder: binder do ServiceManager (padrão: porta efêmera).

    Todo contexto criado tem os Workers desligados no teardown.
    """
    from canary_boot.core.context import BootContext
    from canary_boot.core.services.manager import ServiceManager

    created = []

    def _make(config=None, binder=None):
        ctx = BootContext.create(
            config=boot_config if config is None else config,
            services=ServiceManager(host="127.0.0.1", binder=binder or ephemeral_binder),
        )
        ctx.created_at = datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc)
        created.append(ctx)
        return ctx

    yield _make

    for ctx in created:
        ctx.workers.request_shutdown_all()
        for worker in ctx.workers.list():
            worker.join(timeout=2.0)


@pytest.fixture
def boot_ctx(make_ctx):
    return make_ctx()


@pytest.fixture
def quiet_escalation():
    """ErrorEscalation que nunca lê stdin."""
    from canary_boot.core.escalation import ErrorEscalation

    return ErrorEscalation(interactive=False)


@pytest.fixture
def stub_collaborators():
    """
    Registro com colaborador trivial (sucesso) para todo Stage externo.

    Permite rodar o pipeline completo de start-up sem banco, scripts ou mapa.
    """
    from canary_boot.stages.collaborators import CollaboratorRegistry
    from canary_boot.stages.resources import (
        CREATURES_BOOSTED,
        DATABASE_CONNECT,
        DATABASE_SCHEMA,
        DATABASE_UPDATE,
        HOUSES_PAY_RENT,
        MAP_MAIN,
        MARKET_EXPIRE_OFFERS,
        MARKET_STATISTICS,
        RESOURCE_LOADS,
        RSA_KEY,
    )

    registry = CollaboratorRegistry()
    names = [
        RSA_KEY,
        DATABASE_CONNECT,
        DATABASE_SCHEMA,
        DATABASE_UPDATE,
        CREATURES_BOOSTED,
        MAP_MAIN,
        HOUSES_PAY_RENT,
        MARKET_EXPIRE_OFFERS,
        MARKET_STATISTICS,
    ]
    names += [name for name, _ in RESOURCE_LOADS]
    for name in names:
        registry.add(name, lambda ctx: True)
    return registry
