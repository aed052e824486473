"""Panel configuration.

Values come from a YAML file (``config/panel.yaml`` by default) and are
then overridden by ``SKYPORT_*`` environment variables:

  - SKYPORT_HOST / SKYPORT_PORT: API bind address
  - SKYPORT_STORE_BACKEND: ``memory`` or ``redis``
  - SKYPORT_REDIS_URL: Redis connection URL
  - SKYPORT_PROBE_TIMEOUT: per-probe timeout in seconds
  - SKYPORT_PROBE_MAX_CONCURRENCY: simultaneous probes (0 = unbounded)
  - SKYPORT_PROBE_DEADLINE: seconds allowed for a whole probe round
  - SKYPORT_SECRET_KEY: identity token signing key
  - SKYPORT_LOG_LEVEL / SKYPORT_LOG_JSON: logging output
"""

import os
from pathlib import Path
from typing import Any, Literal, Mapping, Optional

import yaml
from pydantic import BaseModel, ValidationError

from skyport_panel.errors import ConfigError

DEFAULT_CONFIG_PATH = "config/panel.yaml"


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3001


class StoreConfig(BaseModel):
    backend: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379/0"


class ProbeConfig(BaseModel):
    timeout: Optional[float] = 5.0
    max_concurrency: Optional[int] = 32
    deadline: Optional[float] = 30.0


class AuthConfig(BaseModel):
    secret_key: str = ""
    token_expiry_minutes: int = 60


class LoggingConfig(BaseModel):
    level: str = "INFO"
    json_output: bool = False


class PanelConfig(BaseModel):
    server: ServerConfig = ServerConfig()
    store: StoreConfig = StoreConfig()
    probe: ProbeConfig = ProbeConfig()
    auth: AuthConfig = AuthConfig()
    logging: LoggingConfig = LoggingConfig()


# env var → (section, field)
ENV_OVERRIDES = {
    "SKYPORT_HOST": ("server", "host"),
    "SKYPORT_PORT": ("server", "port"),
    "SKYPORT_STORE_BACKEND": ("store", "backend"),
    "SKYPORT_REDIS_URL": ("store", "redis_url"),
    "SKYPORT_PROBE_TIMEOUT": ("probe", "timeout"),
    "SKYPORT_PROBE_MAX_CONCURRENCY": ("probe", "max_concurrency"),
    "SKYPORT_PROBE_DEADLINE": ("probe", "deadline"),
    "SKYPORT_SECRET_KEY": ("auth", "secret_key"),
    "SKYPORT_LOG_LEVEL": ("logging", "level"),
    "SKYPORT_LOG_JSON": ("logging", "json_output"),
}


def load_yaml(config_path: str) -> dict:
    """Load raw configuration from a YAML file.

    Args:
        config_path: Path to YAML config file

    Returns:
        Configuration dictionary (empty when the file doesn't exist)
    """
    config_file = Path(config_path)
    if not config_file.exists():
        return {}

    try:
        with open(config_file) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Cannot parse {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping at the top level")
    return data


def apply_env_overrides(raw: dict, environ: Mapping[str, str]) -> dict:
    """Overlay ``SKYPORT_*`` variables onto the raw config mapping."""
    merged: dict[str, Any] = {section: dict(values or {}) for section, values in raw.items()}
    for env_name, (section, field) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value is None or value == "":
            continue
        merged.setdefault(section, {})[field] = value
    return merged


def load_config(
    config_path: str = DEFAULT_CONFIG_PATH,
    environ: Optional[Mapping[str, str]] = None,
) -> PanelConfig:
    """Build the panel configuration from file + environment.

    Raises:
        ConfigError: If the file is unparsable or a value has the wrong type.
    """
    raw = load_yaml(config_path)
    merged = apply_env_overrides(raw, os.environ if environ is None else environ)
    try:
        return PanelConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
