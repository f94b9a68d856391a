from __future__ import annotations

import logging
import os
import threading
from copy import deepcopy
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

_cache_lock = threading.Lock()
# Resolved config path -> parsed config with env overrides applied.
_cache: dict[str, dict[str, Any]] = {}

DEFAULT_CONTINUUM_ENDPOINT = "http://localhost:9090"
DEFAULT_RPC_ENDPOINT = "http://localhost:8080"


def _project_root() -> Path:
    # fermi_sdk/utils/config_loader.py -> fermi_sdk/utils -> fermi_sdk -> project root
    return Path(__file__).resolve().parents[2]


def default_config_path() -> Path:
    return _project_root() / "config" / "config.yaml"


def default_config() -> dict[str, Any]:
    return {
        "continuum": {"endpoint": DEFAULT_CONTINUUM_ENDPOINT, "connect_timeout_seconds": 10},
        "rpc": {"endpoint": DEFAULT_RPC_ENDPOINT, "timeout_seconds": 10},
        "keypair": {"path": None},
        "logging": {"level": "INFO"},
    }


def _section(cfg: dict[str, Any], name: str) -> dict[str, Any]:
    # An empty YAML block loads as None.
    if not isinstance(cfg.get(name), dict):
        cfg[name] = {}
    return cfg[name]


def _apply_env_overrides(cfg: dict[str, Any]) -> None:
    """
    Override selected YAML settings with environment variables.

    The same variables are honoured by `env_config()` when no config file exists.
    """
    if os.getenv("FERMI_CONTINUUM_ENDPOINT"):
        _section(cfg, "continuum")["endpoint"] = os.environ["FERMI_CONTINUUM_ENDPOINT"]

    if os.getenv("FERMI_RPC_ENDPOINT"):
        _section(cfg, "rpc")["endpoint"] = os.environ["FERMI_RPC_ENDPOINT"]

    if os.getenv("FERMI_KEYPAIR_PATH"):
        _section(cfg, "keypair")["path"] = os.environ["FERMI_KEYPAIR_PATH"]

    if os.getenv("FERMI_LOG_LEVEL"):
        _section(cfg, "logging")["level"] = os.environ["FERMI_LOG_LEVEL"].upper()


def validate_config(cfg: dict[str, Any]) -> None:
    """
    Fail fast if the configuration is missing required sections.
    Keep this minimal; the remote services validate everything else.
    """
    required_top = ["continuum", "rpc"]
    missing = [k for k in required_top if k not in cfg]
    if missing:
        raise ValueError(f"Missing required config sections: {', '.join(missing)}")

    for section in required_top:
        block = cfg.get(section) or {}
        if not str(block.get("endpoint") or "").strip():
            raise ValueError(f"Missing {section}.endpoint in config")


def load_config(config_path: str | Path | None = None, *, force_reload: bool = False) -> dict[str, Any]:
    """
    Return the SDK config for `config_path` (default `config/config.yaml`).

    Each resolved path is parsed once; FERMI_* variables are applied at parse
    time, so `force_reload=True` is needed to pick up a changed environment.
    Callers get their own copy.
    """
    path = Path(config_path) if config_path else default_config_path()
    key = str(path.resolve())

    with _cache_lock:
        if not force_reload and key in _cache:
            return deepcopy(_cache[key])

        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise FileNotFoundError(f"Config file not found: {path}") from None

        try:
            cfg = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"{path}: invalid YAML: {exc}") from exc
        if not isinstance(cfg, dict):
            raise ValueError(f"{path}: expected a mapping with continuum/rpc sections, got {type(cfg).__name__}")

        _apply_env_overrides(cfg)
        validate_config(cfg)

        _cache[key] = cfg
        logger.info(f"Loaded config from {key}")
        return deepcopy(cfg)


def env_config() -> dict[str, Any]:
    """Defaults plus environment overrides, for library use without a config file."""
    cfg = default_config()
    _apply_env_overrides(cfg)
    return cfg
