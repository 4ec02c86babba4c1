# File: src/parkinglot/config.py
"""
Configuration for the Parking Lot System

Settings come from, in increasing priority:
1. ParkingConfig defaults
2. A YAML file (explicit path, or the PARKINGLOT_CONFIG environment variable)
3. PARKINGLOT_LOG_LEVEL for the log level

Example YAML:

    default_level: 1
    allocation_strategy: nearest_first
    case_sensitive_colors: false
    lock_timeout_seconds: 5
    log_level: INFO
    log_file: logs/parking_lot.log
"""

from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Union
import os

import yaml

from .domain.strategies import SlotStrategyFactory


CONFIG_ENV_VAR = "PARKINGLOT_CONFIG"
LOG_LEVEL_ENV_VAR = "PARKINGLOT_LOG_LEVEL"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ParkingConfig:
    """Runtime settings of the parking service and command line driver"""
    default_level: int = 1
    allocation_strategy: str = "nearest_first"
    case_sensitive_colors: bool = False
    lock_timeout_seconds: Optional[float] = None
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.default_level, bool) or not isinstance(self.default_level, int):
            raise ValueError(f"default_level must be an integer, got: {self.default_level!r}")

        if self.allocation_strategy not in SlotStrategyFactory.available_types():
            raise ValueError(
                f"allocation_strategy must be one of "
                f"{SlotStrategyFactory.available_types()}, got: {self.allocation_strategy!r}"
            )

        if not isinstance(self.case_sensitive_colors, bool):
            raise ValueError(
                f"case_sensitive_colors must be true or false, got: {self.case_sensitive_colors!r}"
            )

        if self.lock_timeout_seconds is not None:
            if (isinstance(self.lock_timeout_seconds, bool)
                    or not isinstance(self.lock_timeout_seconds, (int, float))):
                raise ValueError(
                    f"lock_timeout_seconds must be a number, got: {self.lock_timeout_seconds!r}"
                )
            if self.lock_timeout_seconds <= 0:
                raise ValueError("lock_timeout_seconds must be positive")

        if self.log_file is not None and not isinstance(self.log_file, str):
            raise ValueError(f"log_file must be a path, got: {self.log_file!r}")

        self.log_level = str(self.log_level).upper()
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_LOG_LEVELS}, got: {self.log_level!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParkingConfig":
        """Create config from a mapping; unknown keys are rejected"""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(path: Optional[Union[str, Path]] = None) -> ParkingConfig:
    """
    Load configuration from YAML

    Args:
        path: YAML file; defaults to $PARKINGLOT_CONFIG when not given

    Returns: ParkingConfig (defaults if no file is configured)

    Raises: OSError if the file cannot be read, ValueError if it is not
    valid YAML or holds invalid settings
    """
    path = path or os.environ.get(CONFIG_ENV_VAR)
    data: Dict[str, Any] = {}

    if path:
        with open(path, "r", encoding="utf-8") as f:
            try:
                loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Configuration file {path} is not valid YAML: {e}") from e
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Configuration file {path} must contain a mapping")
        data.update(loaded)

    env_level = os.environ.get(LOG_LEVEL_ENV_VAR)
    if env_level:
        data["log_level"] = env_level

    return ParkingConfig.from_dict(data)
