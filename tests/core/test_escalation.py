# tests/core/test_escalation.py
"""
Testes do escalonamento de erro fatal.

Invariantes:
    - `escalate` sempre levanta SystemExit com código não zero
    - o modo interativo lê uma linha antes de sair
    - o modo não interativo nunca toca no stdin
"""

import io

import pytest

from canary_boot.core.errors import BootErrorPayload, FatalError
from canary_boot.core.escalation import CLOSE_NOTICE, EXIT_FAILURE, ErrorEscalation


def _fatal():
    return FatalError(
        stage_name="world.type",
        message="Unknown world type: invalid-mode",
        error=BootErrorPayload(type="CONFIGURATION_ERROR", message="x", details={}, hint="Ajuste server.world_type"),
    )


def test_non_interactive_exits_without_reading_stdin(caplog):
    class _NoStdin(io.StringIO):
        def readline(self, *args):
            raise AssertionError("stdin must not be read")

    with pytest.raises(SystemExit) as exc:
        ErrorEscalation(interactive=False, stdin=_NoStdin()).escalate(_fatal())

    assert exc.value.code == EXIT_FAILURE
    assert "[world.type] Unknown world type: invalid-mode" in caplog.text
    assert "Hint: Ajuste server.world_type" in caplog.text


def test_interactive_waits_for_enter(caplog):
    stdin = io.StringIO("\n")

    with pytest.raises(SystemExit) as exc:
        ErrorEscalation(interactive=True, stdin=stdin).escalate(_fatal())

    assert exc.value.code == EXIT_FAILURE
    assert stdin.tell() == 1
    assert CLOSE_NOTICE in caplog.text
