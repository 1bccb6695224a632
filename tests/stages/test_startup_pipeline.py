# tests/stages/test_startup_pipeline.py
"""
Testes da montagem do pipeline de start-up e dos Stages de rede.

Invariantes:
    - a ordem dos Stages segue a rotina de start-up do servidor
    - Stages de rede são best-effort e falham com NetworkBindError
"""

import pytest

from canary_boot.core.errors import NETWORK_BIND_ERROR
from canary_boot.core.exceptions import NetworkBindError
from canary_boot.core.pipeline import InitializationPipeline
from canary_boot.core.pipeline.types import StageStatus
from canary_boot.notifications.webhook import webhook_post_start_hook
from canary_boot.stages import build_startup_pipeline
from canary_boot.stages.network import service_stages
from canary_boot.stages.startup import ROOT_CHECK, check_root_user


def test_stage_order_follows_startup_routine():
    names = [s.name for s in build_startup_pipeline().stages]

    assert names[:3] == ["startup.banner", "config.dist_copy", "config.load"]
    assert names[3:8] == ["rsa.key", "database.connect", "database.schema", "database.update", "database.optimize"]
    assert names.index("items.otb") < names.index("data/npclua") < names.index("creatures.boosted")
    assert names.index("world.type") < names.index("map.main") < names.index("map.custom")
    assert names.index("game.init_state") < names.index("services.game")
    assert names[-8:-1] == [
        "services.game",
        "services.login",
        "services.status",
        "houses.rent_period",
        "houses.pay_rent",
        "market.expire_offers",
        "market.statistics",
    ]
    assert names[-1] == ROOT_CHECK


def test_mandatory_flags():
    stages = {s.name: s for s in build_startup_pipeline().stages}

    for name in ("config.load", "rsa.key", "database.connect", "world.type", "map.main", "map.custom", "items.otb"):
        assert stages[name].mandatory is True, name
    for name in ("startup.banner", "database.update", "database.optimize", "creatures.boosted", "services.game", "houses.rent_period"):
        assert stages[name].mandatory is False, name


def test_webhook_registered_as_post_start_hook():
    assert build_startup_pipeline().post_start == (webhook_post_start_hook,)


def test_service_stages_register_three_protocols(boot_ctx, ephemeral_binder):
    for stage in service_stages():
        assert stage.action(boot_ctx).status is StageStatus.SUCCESS

    assert boot_ctx.services.services == [
        ("gameworld protocol", 7172),
        ("login protocol", 7171),
        ("status protocol", 7171),
    ]
    assert ephemeral_binder.requested == [("127.0.0.1", 7172), ("127.0.0.1", 7171)]


def test_service_stage_bind_failure(make_ctx, failing_binder):
    ctx = make_ctx(binder=failing_binder)
    game = service_stages()[0]

    with pytest.raises(NetworkBindError) as exc:
        game.action(ctx)
    assert exc.value.details["port"] == 7172


def test_bind_failures_are_warnings_in_pipeline(make_ctx, failing_binder):
    ctx = make_ctx(binder=failing_binder)
    result = InitializationPipeline(service_stages()).execute(ctx)

    assert result.succeeded
    assert [r.status for r in result.stages] == [StageStatus.FAILED] * 3
    assert result.get("services.login").error["type"] == NETWORK_BIND_ERROR
    assert set(ctx.warnings) == {"services.game", "services.login", "services.status"}
    assert ctx.services.is_running() is False


def test_port_zero_from_config_disables_service(make_ctx, boot_config):
    ctx = make_ctx(config={**boot_config, "ports": {"game": 0, "login": 7171, "status": 7171}})

    with pytest.raises(NetworkBindError):
        service_stages()[0].action(ctx)


def test_root_check_warns_when_root(boot_ctx, monkeypatch):
    monkeypatch.setattr("canary_boot.stages.startup._running_as_root", lambda: True)

    result = check_root_user(boot_ctx)

    assert result.summary == "running as root"
    assert "executed as root user" in boot_ctx.warnings[ROOT_CHECK][0]


def test_root_check_quiet_for_normal_user(boot_ctx, monkeypatch):
    monkeypatch.setattr("canary_boot.stages.startup._running_as_root", lambda: False)

    check_root_user(boot_ctx)

    assert ROOT_CHECK not in boot_ctx.warnings


def test_failed_database_update_is_only_a_warning(boot_ctx, stub_collaborators):
    stub_collaborators.add("database.update", lambda ctx: False)
    pipeline = build_startup_pipeline(stub_collaborators)
    stages = [s for s in pipeline.stages if s.name in ("rsa.key", "database.update", "database.schema")]

    result = InitializationPipeline(stages).execute(boot_ctx)

    assert result.succeeded is True
    assert result.get("database.update").status is StageStatus.FAILED
    assert "database.update" in boot_ctx.warnings
