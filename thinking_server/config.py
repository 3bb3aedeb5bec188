from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

import yaml


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "server.yaml"


def config_path_from_env() -> Path:
    return Path(os.getenv("MCP_SERVER_CONFIG", str(DEFAULT_CONFIG_PATH)))


def load_config(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Thinking server config not found at {path}")
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError("Config root must be a mapping")
    return data


def section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Return a config section as a dict, treating a missing or null section as empty."""
    value = config.get(name) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{name}' must be a mapping")
    return value
