"""CatalogLoader: builds the model catalog once per loader.

Factory models come from the companion CLI's help text when it can be
run, otherwise from a built-in list. Custom (BYOK) models come from the
user's settings file, or the legacy config file when settings has none.
Every failure degrades to a fallback; nothing here raises to the caller.
"""

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

from ..config import TunerConfig
from ..logging import JSONLLogger
from .help_parser import HelpModels, parse_help_text
from .models import FALLBACK_MODELS, INHERIT, ModelCatalog

logger = logging.getLogger(__name__)

SETTINGS_KEY = "customModels"
LEGACY_KEY = "custom_models"


def _read_json(path: Path) -> Any:
    """Read a JSON file, returning None when missing or malformed."""
    if not path.exists():
        logger.debug("No config file at %s", path)
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Invalid JSON in %s: %s. Ignoring custom models.", path, e)
        return None
    except OSError as e:
        logger.warning("Cannot read %s: %s. Ignoring custom models.", path, e)
        return None


def _extract_custom_models(data: Any, key: str) -> list[str]:
    """Pull model ids out of a ``[{"model": ...}, ...]`` list."""
    if not isinstance(data, dict):
        return []

    entries = data.get(key, [])
    if not isinstance(entries, list):
        return []

    models: list[str] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        model = entry.get("model")
        if isinstance(model, str) and model.strip() and model.strip() not in models:
            models.append(model.strip())
    return models


def load_custom_models(settings_path: Path, legacy_path: Path) -> list[str]:
    """Load BYOK model ids, preferring the settings file.

    Args:
        settings_path: settings.json holding ``customModels``.
        legacy_path: config.json holding ``custom_models``.

    Returns:
        Ordered, de-duplicated model ids. Empty if neither file has any.
    """
    models = _extract_custom_models(_read_json(settings_path), SETTINGS_KEY)
    if models:
        return models
    return _extract_custom_models(_read_json(legacy_path), LEGACY_KEY)


def run_help_command(command: str, timeout: float) -> str | None:
    """Run ``<command> exec --help`` and return its stdout.

    Returns:
        The output text, or None if the command is missing, times out or
        exits non-zero.
    """
    argv = [command, "exec", "--help"]
    try:
        result = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except FileNotFoundError:
        logger.debug("%s not found, using built-in model list", command)
        return None
    except subprocess.TimeoutExpired:
        logger.warning("%s timed out after %ss", " ".join(argv), timeout)
        return None
    except OSError as e:
        logger.warning("Cannot run %s: %s", command, e)
        return None

    if result.returncode != 0:
        logger.warning(
            "%s exited with %d: %s",
            " ".join(argv),
            result.returncode,
            result.stderr.strip()[:200],
        )
        return None

    return result.stdout


class CatalogLoader:
    """Loads the ModelCatalog at most once.

    Discovery spawns a subprocess, so the first ``load()`` is bounded by
    ``config.discovery_timeout`` and later calls return the cached value.

    Example:
        loader = CatalogLoader(config)
        catalog = loader.load()
    """

    def __init__(
        self,
        config: TunerConfig | None = None,
        event_log: JSONLLogger | None = None,
    ) -> None:
        self.config = config or TunerConfig()
        self.event_log = event_log
        self._catalog: ModelCatalog | None = None

    @property
    def loaded(self) -> bool:
        return self._catalog is not None

    def _discover(self) -> HelpModels | None:
        if not self.config.discover_models:
            return None

        text = run_help_command(self.config.droid_command, self.config.discovery_timeout)
        if text is None:
            return None

        discovered = parse_help_text(text)
        if not discovered.models:
            logger.warning("No models found in %s help output", self.config.droid_command)
            return None
        return discovered

    def load(self) -> ModelCatalog:
        """Return the catalog, building it on first call."""
        if self._catalog is not None:
            return self._catalog

        discovered = self._discover()
        if discovered is not None:
            factory = [m for m in discovered.models if m != INHERIT]
            reasoning = discovered.reasoning
            source = "cli"
        else:
            factory = list(FALLBACK_MODELS)
            reasoning = {}
            source = "builtin"

        assert self.config.settings_path is not None
        assert self.config.legacy_config_path is not None
        byok = load_custom_models(self.config.settings_path, self.config.legacy_config_path)

        self._catalog = ModelCatalog(
            factory=[INHERIT, *factory],
            byok=byok,
            reasoning=reasoning,
        )
        logger.debug("Loaded %d factory and %d custom models (%s)", len(factory), len(byok), source)
        if self.event_log is not None:
            self.event_log.log_catalog(len(factory) + 1, len(byok), source)

        return self._catalog
