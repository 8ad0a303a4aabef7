"""Tuner configuration.

Resolves droid and settings locations plus a few tunables. Defaults point
at the Factory home directory (~/.factory) and can be overridden through
environment variables, which main() may load from a .env file.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

FACTORY_HOME = Path.home() / ".factory"
DEFAULT_LOG_DIR = Path.home() / ".droid-tuner" / "logs"

_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class TunerConfig:
    """Configuration for droid discovery and model catalog loading.

    Attributes:
        droids_dir: Directory scanned for droid Markdown files.
        settings_path: Preferred settings file holding ``customModels``.
        legacy_config_path: Older config file holding ``custom_models``.
        droid_command: Companion CLI whose help text lists models.
        discovery_timeout: Seconds to wait for the companion CLI.
        message_ttl: Seconds a status message stays visible.
        log_dir: Directory for the JSONL event log.
        discover_models: Whether to ask the companion CLI for models at all.
    """

    droids_dir: Path | None = None
    settings_path: Path | None = None
    legacy_config_path: Path | None = None
    droid_command: str = "droid"
    discovery_timeout: float = 5.0
    message_ttl: float = 3.0
    log_dir: Path | None = None
    discover_models: bool = True

    def __post_init__(self) -> None:
        """Validate config and set defaults."""
        if self.droids_dir is None:
            self.droids_dir = FACTORY_HOME / "droids"

        if self.settings_path is None:
            self.settings_path = FACTORY_HOME / "settings.json"

        if self.legacy_config_path is None:
            self.legacy_config_path = FACTORY_HOME / "config.json"

        if self.log_dir is None:
            self.log_dir = DEFAULT_LOG_DIR

        if self.discovery_timeout <= 0:
            raise ValueError("discovery_timeout must be positive")

        if self.message_ttl <= 0:
            raise ValueError("message_ttl must be positive")


def _env_path(name: str) -> Path | None:
    value = os.getenv(name)
    if not value:
        return None
    return Path(value).expanduser()


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        number = float(value)
    except ValueError:
        logger.warning("Invalid value for %s: %r. Using %s.", name, value, default)
        return default
    if number <= 0:
        logger.warning("Non-positive value for %s: %r. Using %s.", name, value, default)
        return default
    return number


def config_from_env() -> TunerConfig:
    """Build a TunerConfig from environment variables.

    Recognized variables:
        DROID_TUNER_DROIDS_DIR, DROID_TUNER_SETTINGS,
        DROID_TUNER_LEGACY_CONFIG, DROID_TUNER_COMMAND,
        DROID_TUNER_DISCOVERY_TIMEOUT, DROID_TUNER_MESSAGE_TTL,
        DROID_TUNER_LOG_DIR, DROID_TUNER_DISCOVER_MODELS

    Returns:
        TunerConfig with unset values left at their defaults.
    """
    discover = os.getenv("DROID_TUNER_DISCOVER_MODELS", "true")

    return TunerConfig(
        droids_dir=_env_path("DROID_TUNER_DROIDS_DIR"),
        settings_path=_env_path("DROID_TUNER_SETTINGS"),
        legacy_config_path=_env_path("DROID_TUNER_LEGACY_CONFIG"),
        droid_command=os.getenv("DROID_TUNER_COMMAND", "droid"),
        discovery_timeout=_env_float("DROID_TUNER_DISCOVERY_TIMEOUT", 5.0),
        message_ttl=_env_float("DROID_TUNER_MESSAGE_TTL", 3.0),
        log_dir=_env_path("DROID_TUNER_LOG_DIR"),
        discover_models=discover.lower().strip() not in _FALSE_VALUES,
    )
