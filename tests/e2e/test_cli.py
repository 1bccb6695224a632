# tests/e2e/test_cli.py
"""
Testes do ponto de entrada de linha de comando.

O CLI é exercitado com arquivos de configuração reais em tmp_path e
sem instalar handlers de sinal no processo de testes.
"""

import logging
import re
from pathlib import Path

import pytest
import yaml

from canary_boot import cli
from canary_boot.core.escalation import EXIT_FAILURE
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


@pytest.fixture(autouse=True)
def no_signal_handlers(monkeypatch):
    monkeypatch.setattr(cli, "install_signal_handlers", lambda services: None)


def _write_config(tmp_path: Path, **server) -> Path:
    disabled = [
        RSA_KEY,
        DATABASE_CONNECT,
        DATABASE_SCHEMA,
        DATABASE_UPDATE,
        CREATURES_BOOSTED,
        MAP_MAIN,
        HOUSES_PAY_RENT,
        MARKET_EXPIRE_OFFERS,
        MARKET_STATISTICS,
    ] + [name for name, _ in RESOURCE_LOADS]
    config = {
        "server": {"name": "Canary", "world_type": "pvp", **server},
        "ports": {"game": 0, "login": 0, "status": 0},
        "stages": {name: {"enabled": False} for name in disabled},
    }
    path = tmp_path / "canary.yaml"
    path.write_text(yaml.safe_dump(config), encoding="utf-8")
    return path


def test_parser_flags():
    args = cli.build_parser().parse_args(["--config", "c.yaml", "--local", "l.yaml", "--non-interactive", "--debug"])

    assert args.config == "c.yaml"
    assert args.local == "l.yaml"
    assert args.non_interactive is True
    assert args.debug is True


def test_config_is_required():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_no_services_returns_failure_code(tmp_path: Path):
    config = _write_config(tmp_path)

    assert cli.main(["--config", str(config), "--non-interactive"]) == EXIT_FAILURE


def test_local_dist_is_applied(tmp_path: Path):
    config = _write_config(tmp_path)
    local = tmp_path / "canary.local.yaml"
    (tmp_path / "canary.local.yaml.dist").write_text("server:\n  world_type: nonsense\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        cli.main(["--config", str(config), "--local", str(local), "--non-interactive"])

    assert exc.value.code == EXIT_FAILURE
    assert local.exists()


def test_missing_config_file_is_fatal(tmp_path: Path):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--config", str(tmp_path / "missing.yaml"), "--non-interactive"])

    assert exc.value.code == EXIT_FAILURE


def test_out_of_memory_is_escalated(tmp_path: Path, monkeypatch, caplog):
    config = _write_config(tmp_path)

    def _exhausted(self):
        raise MemoryError()

    monkeypatch.setattr(cli.BootstrapCoordinator, "run", _exhausted)

    with pytest.raises(SystemExit) as exc:
        cli.main(["--config", str(config), "--non-interactive"])

    assert exc.value.code == EXIT_FAILURE
    assert "Allocation failed, server out of memory" in caplog.text


def test_log_lines_carry_milliseconds():
    formatter = logging.Formatter(cli.LOG_FORMAT, cli.LOG_DATEFMT)
    record = logging.LogRecord("canary_boot", logging.INFO, __file__, 1, "online", None, None)

    line = formatter.format(record)

    assert re.match(r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{3}\] \[INFO\] online$", line)
