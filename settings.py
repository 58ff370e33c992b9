"""Configuration loading for irbridge."""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

from constants import (
    DEFAULT_BACKEND_TIMEOUT,
    DEFAULT_CONFIG_FILE,
    DEFAULT_HASS_PORT,
    DEFAULT_IR_PORT,
    DEFAULT_IR_RECEIVER,
    DEFAULT_LISTEN_HOST,
    DEFAULT_LISTEN_PORT,
    DEFAULT_MAX_IR_REPEAT,
    DEFAULT_PAUSE_MS,
    DEFAULT_ROKU_PORT,
    DEFAULT_ZWAY_PORT,
)

logger = logging.getLogger(__name__)

_TRUTHY = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Resolved bridge configuration."""
    listen_host: str = DEFAULT_LISTEN_HOST
    listen_port: int = DEFAULT_LISTEN_PORT

    ir_host: Optional[str] = None
    ir_port: int = DEFAULT_IR_PORT
    ir_receiver: str = DEFAULT_IR_RECEIVER

    roku_host: Optional[str] = None
    roku_port: int = DEFAULT_ROKU_PORT

    zway_host: Optional[str] = None
    zway_port: int = DEFAULT_ZWAY_PORT
    zway_username: Optional[str] = None
    zway_password: Optional[str] = None

    hass_host: Optional[str] = None
    hass_port: int = DEFAULT_HASS_PORT
    hass_password: Optional[str] = None
    hass_token: Optional[str] = None
    hass_ca_path: Optional[str] = None

    verbose: bool = False
    pause_ms: int = DEFAULT_PAUSE_MS
    max_ir_repeat: int = DEFAULT_MAX_IR_REPEAT
    backend_timeout: float = DEFAULT_BACKEND_TIMEOUT

    @property
    def switch_backend(self) -> Optional[str]:
        """Which backend provides switches/lights: "zway", "hass" or None."""
        if self.zway_host:
            return "zway"
        if self.hass_host:
            return "hass"
        return None


# env var -> (field name, converter)
_ENV_FIELDS = {
    "LISTEN_HOST": ("listen_host", str),
    "LISTEN_PORT": ("listen_port", int),
    "IR_HOST": ("ir_host", str),
    "IR_PORT": ("ir_port", int),
    "IR_RECEIVER": ("ir_receiver", str),
    "ROKU_HOST": ("roku_host", str),
    "ROKU_PORT": ("roku_port", int),
    "ZWAY_HOST": ("zway_host", str),
    "ZWAY_PORT": ("zway_port", int),
    "ZWAY_USERNAME": ("zway_username", str),
    "ZWAY_PASSWORD": ("zway_password", str),
    "HASS_HOST": ("hass_host", str),
    "HASS_PORT": ("hass_port", int),
    "HASS_PASSWORD": ("hass_password", str),
    "HASS_TOKEN": ("hass_token", str),
    "HASS_CA_PATH": ("hass_ca_path", str),
    "IS_VERBOSE": ("verbose", "bool"),
    "PAUSE_MS": ("pause_ms", int),
    "MAX_IR_REPEAT": ("max_ir_repeat", int),
    "BACKEND_TIMEOUT_S": ("backend_timeout", float),
}


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def _convert(name: str, value: Any, converter) -> Any:
    if converter == "bool":
        return _to_bool(value)
    try:
        return converter(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid value for {name}: {value!r}")


def _load_yaml(path: str) -> Dict[str, Any]:
    """Load the optional YAML file. Keys are the env var names, any case."""
    try:
        with open(path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in '{path}': {e}")

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"'{path}' must contain a mapping")
    return {str(k).upper(): v for k, v in config.items()}


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    config_file: Optional[str] = None,
) -> Settings:
    """
    Build Settings from (lowest to highest precedence) defaults, the YAML file
    and the environment. A .env file in the working directory is loaded into
    os.environ first when no explicit environ is given.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    path = config_file or environ.get("IRBRIDGE_CONFIG") or DEFAULT_CONFIG_FILE
    raw: Dict[str, Any] = {}
    if os.path.exists(path):
        raw.update(_load_yaml(path))
        logger.info(f"Loaded configuration from {path}")
    elif config_file:
        raise FileNotFoundError(f"Configuration file '{config_file}' not found")

    for name in _ENV_FIELDS:
        value = environ.get(name)
        if value is not None and str(value).strip() != "":
            raw[name] = value

    values: Dict[str, Any] = {}
    for name, (field_name, converter) in _ENV_FIELDS.items():
        if name in raw and raw[name] is not None:
            values[field_name] = _convert(name, raw[name], converter)

    settings = Settings(**values)

    if settings.pause_ms < 0:
        raise ValueError("PAUSE_MS must not be negative")
    if settings.max_ir_repeat < 1:
        raise ValueError("MAX_IR_REPEAT must be at least 1")
    if settings.zway_host and not (settings.zway_username and settings.zway_password):
        raise ValueError("ZWAY_USERNAME and ZWAY_PASSWORD are required when ZWAY_HOST is set")

    return settings
