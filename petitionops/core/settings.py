# Copyright 2026 PetitionOps
# SPDX-License-Identifier: MIT
"""Centralized configuration loader for PetitionOps.

Loads config.yaml from the repository root and provides typed access to settings.
Falls back to sensible defaults if config.yaml is missing or incomplete.
Environment variables override config.yaml values.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

_CONFIG_CACHE: Optional["PetitionOpsConfig"] = None

DEFAULT_CATEGORY = "EB-1A"
DEFAULT_MAX_SESSIONS = 1000
DEFAULT_CORS_ORIGINS = ("http://localhost:5173",)
DEFAULT_API_HOST = "127.0.0.1"
DEFAULT_API_PORT = 8000


def _repo_root() -> Path:
    """Return the repository root."""
    # petitionops/core/settings.py -> repo root
    return Path(__file__).resolve().parents[2]


@dataclass(frozen=True)
class SelectionConfig:
    """How selections are seeded and what happens on category switch."""
    default_category: str
    clear_on_category_switch: bool
    seed_default: bool


@dataclass(frozen=True)
class SessionsConfig:
    max_sessions: int


@dataclass(frozen=True)
class ApiConfig:
    host: str
    port: int
    cors_origins: Tuple[str, ...]


@dataclass(frozen=True)
class PetitionOpsConfig:
    """Root configuration object."""
    selection: SelectionConfig
    sessions: SessionsConfig
    api: ApiConfig
    debug: bool


def _config_path() -> Path:
    raw = os.getenv("PETITIONOPS_CONFIG", "")
    if raw and raw.strip():
        return Path(raw.strip())
    return _repo_root() / "config.yaml"


def _load_yaml_config() -> dict:
    """Load config.yaml. Returns empty dict if not found or unreadable."""
    config_path = _config_path()
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("[CONFIG] Failed to read %s: %s. Using defaults.", config_path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("[CONFIG] %s is not a mapping. Using defaults.", config_path)
        return {}
    return data


def _bool_value(env_name: str, raw_value: Any, default: bool) -> bool:
    v = os.getenv(env_name, "").lower().strip()
    if v in ("true", "1", "yes"):
        return True
    if v in ("false", "0", "no"):
        return False
    if isinstance(raw_value, bool):
        return raw_value
    return default


def _int_value(env_name: str, raw_value: Any, default: int) -> int:
    try:
        return int(os.getenv(env_name, str(raw_value if raw_value is not None else default)))
    except (TypeError, ValueError):
        return default


def load_config(*, reload: bool = False) -> PetitionOpsConfig:
    """Load and return the PetitionOps configuration.

    Priority order (highest to lowest):
    1. Environment variables (PETITIONOPS_DEFAULT_CATEGORY, PETITIONOPS_CLEAR_ON_SWITCH, etc.)
    2. config.yaml values
    3. Built-in defaults

    Parameters
    ----------
    reload : bool
        If True, force reload from disk. Otherwise use cached config.

    Returns
    -------
    PetitionOpsConfig
        The loaded configuration.
    """
    global _CONFIG_CACHE

    if _CONFIG_CACHE is not None and not reload:
        return _CONFIG_CACHE

    raw = _load_yaml_config()

    selection_raw = raw.get("selection", {}) or {}
    default_category = os.getenv(
        "PETITIONOPS_DEFAULT_CATEGORY",
        str(selection_raw.get("default_category", DEFAULT_CATEGORY)),
    ).strip()
    selection_config = SelectionConfig(
        default_category=default_category or DEFAULT_CATEGORY,
        clear_on_category_switch=_bool_value(
            "PETITIONOPS_CLEAR_ON_SWITCH", selection_raw.get("clear_on_category_switch"), True
        ),
        seed_default=_bool_value("PETITIONOPS_SEED_DEFAULT", selection_raw.get("seed_default"), False),
    )

    sessions_raw = raw.get("sessions", {}) or {}
    max_sessions = _int_value("PETITIONOPS_MAX_SESSIONS", sessions_raw.get("max_sessions"), DEFAULT_MAX_SESSIONS)
    sessions_config = SessionsConfig(max_sessions=max(1, max_sessions))

    # Comma-separated in env, list in yaml
    api_raw = raw.get("api", {}) or {}
    env_origins = (os.getenv("UI_CORS_ORIGINS") or "").strip()
    if env_origins:
        origins = tuple(o.strip() for o in env_origins.split(",") if o.strip())
    else:
        origins = tuple(str(o).strip() for o in (api_raw.get("cors_origins") or ()) if str(o).strip())
    api_config = ApiConfig(
        host=os.getenv("PETITIONOPS_API_HOST", str(api_raw.get("host", DEFAULT_API_HOST))).strip() or DEFAULT_API_HOST,
        port=_int_value("PETITIONOPS_API_PORT", api_raw.get("port"), DEFAULT_API_PORT),
        cors_origins=origins or DEFAULT_CORS_ORIGINS,
    )

    debug = _bool_value("PETITIONOPS_DEBUG", raw.get("debug"), False)

    _CONFIG_CACHE = PetitionOpsConfig(
        selection=selection_config,
        sessions=sessions_config,
        api=api_config,
        debug=debug,
    )
    return _CONFIG_CACHE


def get_config() -> PetitionOpsConfig:
    """Get the cached configuration (loads on first call)."""
    return load_config()


__all__ = [
    "ApiConfig",
    "PetitionOpsConfig",
    "SelectionConfig",
    "SessionsConfig",
    "get_config",
    "load_config",
]
