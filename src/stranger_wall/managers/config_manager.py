"""
Config Manager

Loads the wall configuration file (YAML, or legacy JSON which YAML also
parses) and turns it into a validated WallConfig.
"""

import yaml
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from stranger_wall.models.config import StripHardwareConfig, WallConfig
from stranger_wall.models.letter import LetterMap
from stranger_wall.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)

DEFAULT_CONFIG_PATH = "config/stranger_wall.yaml"
COLOR_ORDERS = ("RGB", "RBG", "GRB", "GBR", "BRG", "BGR")


class ConfigError(Exception):
    """Configuration is missing or invalid. Fatal at startup."""


class ConfigManager:
    """
    Configuration loader for the wall.

    Expected keys:
        number_of_leds: 50
        letter_map: {A: 0, B: 1, ...}
        message_source_endpoint: https://<project>.firebaseio.com
        message_path: messages          (optional)
        hardware: {gpio_pin: 18, ...}   (optional)

    `firebase_db_url` is accepted in place of `message_source_endpoint`.

    Example:
        config = ConfigManager().load()
        config.number_of_leds      # 50
        config.letter_map.resolve("a")
    """

    def __init__(self, config_path: Union[str, Path] = DEFAULT_CONFIG_PATH):
        """
        Args:
            config_path: Path to the config file. Relative paths are resolved
                against the package directory; absolute paths are used as-is.
        """
        self.config_path = Path(config_path)
        self.data: Dict[str, Any] = {}
        self.config: Optional[WallConfig] = None

    @property
    def full_path(self) -> Path:
        package_dir = Path(__file__).parent.parent
        return package_dir / self.config_path

    def load(self) -> WallConfig:
        """
        Read and validate the config file.

        Raises:
            ConfigError: file missing or unreadable, malformed, or invalid values
        """
        path = self.full_path
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except FileNotFoundError as ex:
            raise ConfigError(f"Config file not found: {path}") from ex
        except OSError as ex:
            raise ConfigError(f"Cannot read config file {path}: {ex}") from ex
        except yaml.YAMLError as ex:
            raise ConfigError(f"Malformed config file {path}: {ex}") from ex

        if not isinstance(raw, dict):
            raise ConfigError(f"Config file {path} must contain a mapping at top level")

        self.data = raw
        self.config = self.parse(raw)

        log.info("Configuration file loaded", path=str(path))
        log.info(
            f"Your strand has {self.config.number_of_leds} LEDs",
            letters=len(self.config.letter_map),
            gpio=self.config.hardware.gpio_pin,
        )
        return self.config

    @classmethod
    def parse(cls, raw: Dict[str, Any]) -> WallConfig:
        """Build a WallConfig from an already-parsed dict."""
        led_count = raw.get("number_of_leds")
        if isinstance(led_count, bool) or not isinstance(led_count, int):
            raise ConfigError(f"number_of_leds must be an integer, got {led_count!r}")
        if led_count <= 0:
            raise ConfigError(f"number_of_leds must be positive, got {led_count}")

        letters_raw = raw.get("letter_map")
        if not isinstance(letters_raw, dict):
            raise ConfigError("letter_map must be a mapping of character to pixel index")
        try:
            letter_map = LetterMap.from_dict(letters_raw)
        except ValueError as ex:
            raise ConfigError(str(ex)) from ex

        bad = letter_map.out_of_range(led_count)
        if bad:
            entries = ", ".join(f"{letter}={index}" for letter, index in bad)
            raise ConfigError(f"letter_map positions outside 0..{led_count - 1}: {entries}")

        endpoint = raw.get("message_source_endpoint", raw.get("firebase_db_url", ""))
        if endpoint is None:
            endpoint = ""
        if not isinstance(endpoint, str):
            raise ConfigError(f"message_source_endpoint must be a string, got {endpoint!r}")

        message_path = raw.get("message_path", "messages")
        if not isinstance(message_path, str) or not message_path.strip("/"):
            raise ConfigError(f"message_path must be a non-empty string, got {message_path!r}")

        return WallConfig(
            number_of_leds=led_count,
            letter_map=letter_map,
            message_source_endpoint=endpoint.rstrip("/"),
            message_path=message_path.strip("/"),
            hardware=cls._parse_hardware(raw.get("hardware") or {}),
        )

    @staticmethod
    def _parse_hardware(raw: Dict[str, Any]) -> StripHardwareConfig:
        if not isinstance(raw, dict):
            raise ConfigError("hardware must be a mapping")

        known = {f.name for f in fields(StripHardwareConfig)}
        unknown = set(raw) - known
        if unknown:
            raise ConfigError(f"Unknown hardware settings: {sorted(unknown)}")

        try:
            hardware = StripHardwareConfig(**raw)
        except TypeError as ex:
            raise ConfigError(f"Invalid hardware settings: {ex}") from ex

        if hardware.color_order.upper() not in COLOR_ORDERS:
            raise ConfigError(f"Unsupported color order: {hardware.color_order}")
        return hardware
