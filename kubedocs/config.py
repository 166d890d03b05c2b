"""Configuration loading from KUBEDOCS_* environment variables.

    KUBEDOCS_CLUSTER_ID          registry key for the served cluster ("default")
    KUBEDOCS_SCHEMA_FILE         saved /openapi/v2 document; skips live discovery
    KUBEDOCS_DISCOVERY_TIMEOUT   seconds, clamped to 5..300 (30)
    KUBEDOCS_API_PORT            clamped to 1024..65535 (8080)
    KUBEDOCS_LOG_LEVEL           debug | info | warning | error (info)
"""

from __future__ import annotations

import os

import structlog

from kubedocs.models.config import APIConfig, DiscoveryConfig, KubeDocsConfig, LogConfig

_PREFIX = "KUBEDOCS_"
_LOG_LEVELS = ("debug", "info", "warning", "error")

_log = structlog.get_logger(component="config")


def _env(key: str, default: str = "") -> str:
    return os.environ.get(_PREFIX + key, default).strip() or default


def _env_int(key: str, default: int, min_val: int, max_val: int) -> int:
    raw = _env(key, str(default))
    try:
        val = int(raw)
    except ValueError:
        raise ValueError(f"{_PREFIX}{key} must be an integer, got {raw!r}") from None
    clamped = min(max(val, min_val), max_val)
    if clamped != val:
        _log.warning("config_value_clamped", key=_PREFIX + key, value=val, used=clamped)
    return clamped


def _log_level(value: str) -> str:
    level = value.lower()
    if level not in _LOG_LEVELS:
        raise ValueError(f"{_PREFIX}LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, got {value!r}")
    return level


def load_config() -> KubeDocsConfig:
    return KubeDocsConfig(
        cluster_id=_env("CLUSTER_ID", "default"),
        discovery=DiscoveryConfig(
            schema_file=_env("SCHEMA_FILE"),
            timeout_seconds=_env_int("DISCOVERY_TIMEOUT", 30, min_val=5, max_val=300),
        ),
        api=APIConfig(port=_env_int("API_PORT", 8080, min_val=1024, max_val=65535)),
        log=LogConfig(level=_log_level(_env("LOG_LEVEL", "info"))),
    )
