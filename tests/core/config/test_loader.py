# tests/core/config/test_loader.py
"""
Testes do loader de configuração.

Os testes asseguram que:
- o arquivo de defaults é obrigatório
- o arquivo local é opcional e tem prioridade
- o `.dist` é copiado apenas quando o arquivo local não existe
- formatos e raízes inválidos são rejeitados com erros tipados
"""

from pathlib import Path

import pytest

try:
    from canary_boot.core.config.loader import ensure_local_config, load_config
    from canary_boot.core.config.errors import (
        DefaultsNotFoundError,
        InvalidConfigRootTypeError,
        UnsupportedConfigFormatError,
    )
except Exception as e:  # noqa: BLE001
    load_config = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """Falha de forma explícita quando o loader canônico não pode ser importado."""
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing config loader. Implement:\n"
            "- src/canary_boot/core/config/loader.py (load_config, ensure_local_config)\n"
            "- src/canary_boot/core/config/errors.py\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_missing_defaults_raises(tmp_path: Path):
    _require_imports()
    with pytest.raises(DefaultsNotFoundError):
        load_config(defaults_path=str(tmp_path / "missing.yaml"))


def test_load_defaults_only(tmp_path: Path, canary_defaults_yaml):
    _require_imports()
    defaults = tmp_path / "canary.yaml"
    defaults.write_text(canary_defaults_yaml, encoding="utf-8")

    out = load_config(defaults_path=str(defaults), local_path=str(tmp_path / "absent.yaml"))

    assert out["server"]["world_type"] == "pvp"
    assert out["ports"]["game"] == 7172
    assert out["stages"]["rsa.key"]["enabled"] is True


def test_load_defaults_and_local(tmp_path: Path, canary_defaults_yaml, canary_local_yaml):
    """
    O arquivo local sobrescreve apenas as chaves que declara.

    Invariantes:
        - chaves ausentes no local preservam o valor dos defaults
        - chaves com ponto (nomes de Stage) são tratadas como chaves simples
    """
    _require_imports()
    defaults = tmp_path / "canary.yaml"
    local = tmp_path / "canary.local.yaml"
    defaults.write_text(canary_defaults_yaml, encoding="utf-8")
    local.write_text(canary_local_yaml, encoding="utf-8")

    out = load_config(defaults_path=str(defaults), local_path=str(local))

    assert out["server"]["world_type"] == "no-pvp"
    assert out["server"]["name"] == "Canary"
    assert out["stages"]["rsa.key"]["enabled"] is False
    assert out["map"]["custom_enabled"] is False


def test_json_defaults_are_supported(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "canary.json"
    defaults.write_text('{"server": {"name": "Json"}}', encoding="utf-8")

    assert load_config(defaults_path=str(defaults)) == {"server": {"name": "Json"}}


def test_empty_file_is_empty_dict(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "empty.yaml"
    defaults.write_text("", encoding="utf-8")

    assert load_config(defaults_path=str(defaults)) == {}


def test_invalid_root_type_raises(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "canary.yaml"
    defaults.write_text("- just\n- a\n- list\n", encoding="utf-8")
    with pytest.raises(InvalidConfigRootTypeError):
        load_config(defaults_path=str(defaults))


def test_unsupported_extension_raises(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "config.lua"
    defaults.write_text('worldType = "pvp"\n', encoding="utf-8")
    with pytest.raises(UnsupportedConfigFormatError):
        load_config(defaults_path=str(defaults))


def test_dist_is_copied_when_local_missing(tmp_path: Path, canary_local_yaml):
    _require_imports()
    local = tmp_path / "canary.local.yaml"
    dist = tmp_path / "canary.local.yaml.dist"
    dist.write_text(canary_local_yaml, encoding="utf-8")

    assert ensure_local_config(str(local)) is True
    assert local.read_text(encoding="utf-8") == canary_local_yaml


def test_dist_never_overwrites_existing_local(tmp_path: Path):
    _require_imports()
    local = tmp_path / "canary.local.yaml"
    dist = tmp_path / "canary.local.yaml.dist"
    local.write_text("server:\n  name: Mine\n", encoding="utf-8")
    dist.write_text("server:\n  name: Dist\n", encoding="utf-8")

    assert ensure_local_config(str(local)) is False
    assert "Mine" in local.read_text(encoding="utf-8")


def test_no_dist_means_nothing_to_copy(tmp_path: Path):
    _require_imports()
    local = tmp_path / "canary.local.yaml"

    assert ensure_local_config(str(local)) is False
    assert not local.exists()
