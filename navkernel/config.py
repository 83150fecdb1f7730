"""
Configuration manager and logging setup for navkernel scripts.
"""

import copy
import json
import logging
import os
from typing import Any, Dict, List, Optional

from .errors import InvalidArgument

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO", log_file: Optional[str] = None):
    """
    Configure root logging for command line tools.

    Args:
        level: Logging level name
        log_file: Also write to this file when given
    """
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


class Config:
    """Configuration manager for the localization tools."""

    DEFAULT_CONFIG = {
        # Input record file
        "data_file": "data/10.txt",

        # GNSS antenna installation
        "antenna": {
            "position": [-0.17, -0.20],   # x, y in the vehicle frame (m)
            "angle_deg": 12.06,
        },

        # Map origin subtracted from UTM positions (m)
        "map_origin": [0.0, 0.0, 0.0],
        "require_heading": False,

        # Numerical thresholds
        "interpolation_time_th": 0.5,
        "fit_plane_eps": 1e-2,
        "fit_line_eps": 0.2,

        # Logging
        "log_level": "INFO",
        "log_file": None,
        "timer_dump_file": None,
    }

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to a JSON file overriding the defaults
        """
        self.config_file = config_file
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)

        if config_file is not None:
            if os.path.exists(config_file):
                self.load_config()
            else:
                logger.warning("Config file %s not found, using defaults", config_file)

    def load_config(self) -> bool:
        """
        Load configuration from file.

        Returns:
            True if loaded successfully
        """
        try:
            with open(self.config_file, 'r') as f:
                file_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load config: %s", e)
            return False

        # File config overrides defaults
        self._merge_config(self.config, file_config)
        logger.info("Configuration loaded from %s", self.config_file)
        return True

    def save_config(self, config_file: Optional[str] = None) -> bool:
        """
        Save current configuration to file.

        Returns:
            True if saved successfully
        """
        path = config_file or self.config_file
        if path is None:
            logger.error("No config file given")
            return False
        try:
            with open(path, 'w') as f:
                json.dump(self.config, f, indent=2)
        except OSError as e:
            logger.error("Failed to save config: %s", e)
            return False

        logger.info("Configuration saved to %s", path)
        return True

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any], prefix: str = ""):
        """
        Merge file values into the configuration, section by section.

        Keys without a default are kept and logged as a warning, since the
        property accessors never read a misspelled key.
        """
        for key, value in override.items():
            current = base.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                self._merge_config(current, value, f"{prefix}{key}.")
                continue
            if key not in base:
                logger.warning("Unknown config key: %s%s", prefix, key)
            base[key] = value

    def get(self, key: str, default=None):
        """Get a value by dotted key, e.g. ``antenna.angle_deg``."""
        node = self.config
        for part in key.split('.'):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any):
        """
        Set a value by dotted key, creating missing sections.

        Raises:
            InvalidArgument: a parent of the key holds a value, not a section
        """
        *sections, leaf = key.split('.')
        node = self.config
        for part in sections:
            node = node.setdefault(part, {})
            if not isinstance(node, dict):
                raise InvalidArgument(f"'{part}' in '{key}' is not a config section")
        node[leaf] = value

    # Property accessors for common configuration values
    @property
    def data_file(self) -> str:
        return self.config["data_file"]

    @property
    def antenna_position(self) -> List[float]:
        return self.config["antenna"]["position"]

    @property
    def antenna_angle(self) -> float:
        return self.config["antenna"]["angle_deg"]

    @property
    def map_origin(self) -> List[float]:
        return self.config["map_origin"]

    @property
    def require_heading(self) -> bool:
        return self.config["require_heading"]

    @property
    def interpolation_time_th(self) -> float:
        return self.config["interpolation_time_th"]

    @property
    def fit_plane_eps(self) -> float:
        return self.config["fit_plane_eps"]

    @property
    def fit_line_eps(self) -> float:
        return self.config["fit_line_eps"]

    @property
    def timer_dump_file(self) -> Optional[str]:
        return self.config["timer_dump_file"]

    @property
    def log_level(self) -> str:
        return self.config["log_level"]

    @property
    def log_file(self) -> Optional[str]:
        return self.config["log_file"]

    def setup_logging(self):
        """Apply the configured log level and file."""
        configure_logging(self.log_level, self.log_file)
