"""
Driver Configuration

Loads the random device service configuration from a JSON file:

    {
        "service_name": "device-random",
        "log_level": "INFO",
        "log_file": null,
        "seed": null,
        "atomic_writes": false,
        "limits": {
            "Int8": {"min": -100, "max": 100}
        }
    }

Every key is optional. Limits may only narrow the full signed range of
their type.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import UnsupportedType
from .types import ValueType, WidthLimits, default_limits, resolve_limits


logger = logging.getLogger(__name__)

DEFAULT_SERVICE_NAME = "device-random"

# Environment variable naming the config file
CONFIG_ENV_VAR = "DEVICE_RANDOM_CONFIG"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Configuration errors"""
    pass


@dataclass
class DriverConfig:
    """Random device service configuration"""
    service_name: str = DEFAULT_SERVICE_NAME
    log_level: str = "INFO"
    log_file: Optional[str] = None
    seed: Optional[int] = None
    atomic_writes: bool = False
    limits: Dict[ValueType, WidthLimits] = field(default_factory=default_limits)

    def __post_init__(self):
        try:
            self.limits = resolve_limits(self.limits)
        except ValueError as e:
            raise ConfigError(str(e))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DriverConfig':
        """
        Build a config from a parsed JSON object.

        Raises:
            ConfigError: If any value is invalid
        """
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a JSON object")

        config = cls()

        if "service_name" in data:
            if not isinstance(data["service_name"], str) or not data["service_name"]:
                raise ConfigError("'service_name' must be a non-empty string")
            config.service_name = data["service_name"]

        if "log_level" in data:
            level = str(data["log_level"]).upper()
            if level not in LOG_LEVELS:
                raise ConfigError(f"Unknown log_level '{data['log_level']}'")
            config.log_level = level

        if data.get("log_file") is not None:
            config.log_file = str(data["log_file"])

        if data.get("seed") is not None:
            if not _is_int(data["seed"]):
                raise ConfigError("'seed' must be an integer")
            config.seed = data["seed"]

        if "atomic_writes" in data:
            if not isinstance(data["atomic_writes"], bool):
                raise ConfigError("'atomic_writes' must be true or false")
            config.atomic_writes = data["atomic_writes"]

        if "limits" in data:
            config.limits = _parse_limits(data["limits"])

        return config


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_limits(raw: Any) -> Dict[ValueType, WidthLimits]:
    """Parse the ``limits`` section, filling unset types with full ranges"""
    if not isinstance(raw, dict):
        raise ConfigError("'limits' must be an object keyed by value type")

    limits = default_limits()

    for type_name, entry in raw.items():
        try:
            value_type = ValueType.parse(type_name)
        except UnsupportedType:
            raise ConfigError(f"Unknown value type in limits: '{type_name}'")

        if not isinstance(entry, dict):
            raise ConfigError(f"Limits for {type_name} must be an object")

        full = value_type.full_range
        floor = entry.get("min", full.floor)
        ceiling = entry.get("max", full.ceiling)

        if not _is_int(floor) or not _is_int(ceiling):
            raise ConfigError(f"Limits for {type_name} must be integers")
        if floor > ceiling:
            raise ConfigError(f"Limits for {type_name}: min {floor} exceeds max {ceiling}")
        if not full.contains(floor) or not full.contains(ceiling):
            raise ConfigError(
                f"Limits for {type_name} must lie within {full.floor} ~ {full.ceiling}"
            )

        limits[value_type] = WidthLimits(floor=floor, ceiling=ceiling)

    return limits


def load_config(path: Optional[str] = None) -> DriverConfig:
    """
    Load configuration from file.

    Falls back to ``$DEVICE_RANDOM_CONFIG`` when no path is given, and to
    defaults when neither names an existing file.

    Raises:
        ConfigError: If the file exists but is not valid
    """
    path = path or os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return DriverConfig()

    config_path = Path(path)
    if not config_path.is_file():
        logger.info(f"Config file {config_path} not found, using defaults")
        return DriverConfig()

    try:
        content = config_path.read_text(encoding='utf-8')

        # Skip UTF-8 BOM if present
        if content.startswith('\ufeff'):
            content = content[1:]

        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(f"JSON parse error in {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read config {config_path}: {e}")

    config = DriverConfig.from_dict(data)
    logger.debug(f"Loaded config from {config_path}")
    return config
