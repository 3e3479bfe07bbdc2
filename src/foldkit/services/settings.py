"""User settings for foldkit and the JSON file that stores them.

Values are resolved in three layers: ``settings.json``, then runtime overrides
(``--set`` on the command line), then ``FOLDKIT_*`` environment variables.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Callable, Dict, Mapping

__all__ = ["Settings", "SettingsStore", "SETTINGS_DIR"]

LOGGER = logging.getLogger(__name__)

SETTINGS_DIR = Path.home() / ".foldkit"
SETTINGS_FORMAT_VERSION = 1


def _env_bool(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "on", "debug"}


# environment variable -> (field, parser)
_ENVIRONMENT: Mapping[str, tuple[str, Callable[[str], Any]]] = {
    "FOLDKIT_PERSIST_FOLDS": ("persist_folds", _env_bool),
    "FOLDKIT_PLACEHOLDER": ("placeholder_glyph", str),
    "FOLDKIT_DEBUG_LOGGING": ("debug_logging", _env_bool),
}


@dataclass(slots=True)
class Settings:
    """Options that shape folding behaviour."""

    persist_folds: bool = True
    placeholder_glyph: str = "..."
    debug_logging: bool = False


def _known_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    names = {item.name for item in fields(Settings)}
    return {key: value for key, value in payload.items() if key in names and value is not None}


class SettingsStore:
    """Reads and writes :class:`Settings` as JSON at :attr:`path`."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or SETTINGS_DIR / "settings.json"

    @property
    def path(self) -> Path:
        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Settings:
        """Return the effective settings; unknown keys in any layer are ignored."""

        settings = self._merge(Settings(), self._read_file(), "file")
        if overrides:
            settings = self._merge(settings, overrides, "runtime")
        environment = {
            field_name: parse(os.environ[name])
            for name, (field_name, parse) in _ENVIRONMENT.items()
            if name in os.environ
        }
        return self._merge(settings, environment, "environment")

    def save(self, settings: Settings) -> Path:
        """Write ``settings`` through a temporary file so readers never see a partial file."""

        document = json.dumps({"version": SETTINGS_FORMAT_VERSION, **asdict(settings)}, indent=2, sort_keys=True)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        staging = self._path.with_name(self._path.name + ".tmp")
        staging.write_text(document, encoding="utf-8")
        staging.replace(self._path)
        LOGGER.debug("Wrote settings to %s", self._path)
        return self._path

    def _read_file(self) -> Mapping[str, Any]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            LOGGER.warning("Ignoring %s: invalid JSON (%s)", self._path, exc)
            return {}
        if not isinstance(data, dict):
            LOGGER.warning("Ignoring %s: expected a JSON object, found %s", self._path, type(data).__name__)
            return {}
        return data

    def _merge(self, settings: Settings, layer: Mapping[str, Any], source: str) -> Settings:
        values = _known_fields(layer)
        if not values:
            return settings
        LOGGER.debug("Applying %s settings: %s", source, ", ".join(sorted(values)))
        return replace(settings, **values)
