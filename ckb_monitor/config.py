"""
Monitor configuration: built-in defaults, optionally overridden by a YAML file
and then by command-line flags.
"""

from __future__ import annotations

from pathlib import Path

import yaml

DEFAULT_CONFIG_PATH = Path("config.yaml")

# Config defaults (match config-example.yaml)
DEFAULTS = {
    "host": "http://127.0.0.1",
    "base_port": 19000,
    "client_count": 100,
    "interval": 60,
    "max_block_diff": 30,
    "timeout": 2,
    "verbose": False,
}

MAX_PORT = 65535


def load_config(path: Path) -> dict:
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise SystemExit(f"Invalid YAML in {path}: {e}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SystemExit(f"Config file {path} must contain a mapping")
    return data


def merge_config(file_cfg: dict | None = None, overrides: dict | None = None) -> dict:
    """Merge defaults, file values and overrides (later wins). None overrides are ignored."""
    merged = dict(DEFAULTS)
    merged.update(file_cfg or {})
    for key, val in (overrides or {}).items():
        if val is not None:
            merged[key] = val
    merged["host"] = str(merged["host"]).rstrip("/")
    return merged


def validate_config(cfg: dict) -> None:
    unknown = sorted(set(cfg) - set(DEFAULTS))
    if unknown:
        raise SystemExit(f"Unknown config key(s): {', '.join(unknown)}")

    for key in ("base_port", "client_count", "max_block_diff"):
        if isinstance(cfg[key], bool) or not isinstance(cfg[key], int):
            raise SystemExit(f"'{key}' must be an integer, got {cfg[key]!r}")
    for key in ("interval", "timeout"):
        if isinstance(cfg[key], bool) or not isinstance(cfg[key], (int, float)):
            raise SystemExit(f"'{key}' must be a number, got {cfg[key]!r}")

    if cfg["client_count"] < 1:
        raise SystemExit("'client_count' must be at least 1")
    if cfg["interval"] < 0:
        raise SystemExit("'interval' cannot be negative")
    if cfg["max_block_diff"] < 0:
        raise SystemExit("'max_block_diff' cannot be negative")
    if cfg["timeout"] <= 0:
        raise SystemExit("'timeout' must be greater than 0")

    first, last = cfg["base_port"], cfg["base_port"] + cfg["client_count"] - 1
    if first < 1 or last > MAX_PORT:
        raise SystemExit(f"Client ports {first}-{last} fall outside 1-{MAX_PORT}")

    if not str(cfg["host"]).startswith(("http://", "https://")):
        raise SystemExit(f"'host' must start with http:// or https://, got {cfg['host']!r}")


def resolve_config(path: Path | None, overrides: dict | None = None) -> dict:
    """Build the effective config. A missing file is only an error if it was asked for explicitly."""
    file_cfg: dict = {}
    if path is not None:
        if not path.exists():
            raise SystemExit(f"Config not found at {path}")
        file_cfg = load_config(path)
    elif DEFAULT_CONFIG_PATH.exists():
        file_cfg = load_config(DEFAULT_CONFIG_PATH)

    cfg = merge_config(file_cfg, overrides)
    validate_config(cfg)
    return cfg
