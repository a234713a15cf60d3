from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load the YAML config (default config/icp.yml)
- Validate it against the bundled JSON schema (config_schema.json)
- Apply defaults (no HTTP timeout, ./logs for the error log)
- Let environment variables (typically from .env) override API settings
"""

__all__ = [
    "ConfigError",
    "ApiConfig",
    "AppConfig",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
    "resolve_api_settings",
]

DEFAULT_CONFIG_PATH = Path("config/icp.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")

ENV_OVERRIDES = {
    "base_url": "ICP_API_BASE_URL",
    "mapping_base_url": "ICP_MAPPING_BASE_URL",
    "token": "ICP_API_TOKEN",
    "user_id": "ICP_USER_ID",
}


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ApiConfig:
    base_url: str  # sheet-storage API
    mapping_base_url: str  # scorer API
    user_id: int | str
    token: str | None = None
    timeout: float | None = None  # None = HTTP client default (no timeout)


@dataclass(frozen=True)
class AppConfig:
    api: ApiConfig
    error_log_dir: str = "./logs"


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing or invalid, or config does not match
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)

    api_raw = data["api"]
    api = ApiConfig(
        base_url=api_raw["base_url"],
        mapping_base_url=api_raw["mapping_base_url"],
        user_id=api_raw["user_id"],
        token=api_raw.get("token"),
        timeout=api_raw.get("timeout"),
    )
    return AppConfig(api=api, error_log_dir=data.get("error_log_dir", "./logs"))


def resolve_api_settings(cfg: AppConfig, environ: dict[str, str] | None = None) -> ApiConfig:
    """Return ``cfg.api`` with environment overrides applied.

    Priority: environment (ICP_API_BASE_URL, ICP_MAPPING_BASE_URL,
    ICP_API_TOKEN, ICP_USER_ID) > YAML values.
    """
    env = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    for field_name, var in ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            overrides[field_name] = value
    return replace(cfg.api, **overrides) if overrides else cfg.api
