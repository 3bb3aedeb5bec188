from __future__ import annotations

from pathlib import Path

import pytest

from thinking_server.config import DEFAULT_CONFIG_PATH, config_path_from_env, load_config, section


def test_default_config_loads() -> None:
    config = load_config(DEFAULT_CONFIG_PATH)
    assert section(config, "server")["port"] == 4002
    assert section(config, "thinking")["log_thoughts"] is True


def test_missing_config_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yaml")


def test_non_mapping_root_raises(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_empty_file_is_empty_config(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == {}


def test_section_helpers() -> None:
    assert section({"tools": None}, "tools") == {}
    assert section({}, "tools") == {}
    with pytest.raises(ValueError):
        section({"tools": "full"}, "tools")


def test_config_path_from_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("MCP_SERVER_CONFIG", str(tmp_path / "custom.yaml"))
    assert config_path_from_env() == tmp_path / "custom.yaml"
    monkeypatch.delenv("MCP_SERVER_CONFIG")
    assert config_path_from_env() == DEFAULT_CONFIG_PATH
