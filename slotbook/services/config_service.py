import copy
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic import ValidationError

from slotbook.core.storage import lock_for, read_json, write_json
from slotbook.models.config import DEFAULT_CONFIG, OwnerConfig

logger = logging.getLogger(__name__)


class ConfigSource(str, Enum):
    LOADED = "loaded"
    INITIALIZED = "initialized"


@dataclass(frozen=True)
class ConfigLoadResult:
    config: OwnerConfig
    source: ConfigSource
    # Stored top-level keys that failed validation and were replaced by defaults
    ignored_keys: tuple[str, ...] = ()

    @property
    def initialized(self) -> bool:
        return self.source is ConfigSource.INITIALIZED


def _defaults() -> dict:
    return copy.deepcopy(DEFAULT_CONFIG)


def _merge(stored: dict) -> tuple[OwnerConfig, tuple[str, ...]]:
    """Shallow-merge stored over defaults; invalid stored keys fall back to their default."""
    stored = dict(stored)
    ignored: list[str] = []
    while True:
        try:
            return OwnerConfig.model_validate({**_defaults(), **stored}), tuple(ignored)
        except ValidationError as e:
            bad = {err["loc"][0] for err in e.errors() if err["loc"] and err["loc"][0] in stored}
            if not bad:
                raise
            for key in sorted(bad):
                logger.warning("Ignoring invalid config key %r: %s", key, e)
                del stored[key]
                ignored.append(key)


class ConfigStore:
    """Owner configuration backed by a JSON file, re-read on every call."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.lock = lock_for(self.path)

    def load_or_initialize(self) -> ConfigLoadResult:
        """Load the stored config, or write and return the defaults.

        The stored document is merged shallowly over the defaults: a top-level key
        present on disk replaces the default value wholesale. Only a missing or
        unparseable document is replaced on disk. A key that parses but fails
        validation is swapped for its default in memory and reported in
        ``ignored_keys``; the file is left as the owner wrote it.
        """
        with self.lock:
            try:
                stored = read_json(self.path)
                if not isinstance(stored, dict):
                    raise ValueError("config document must be a JSON object")
            except FileNotFoundError:
                logger.info("No config at %s, writing defaults", self.path)
            except ValueError as e:
                # json.JSONDecodeError is a ValueError
                logger.warning("Config at %s is not valid JSON, rewriting defaults: %s", self.path, e)
            except OSError as e:
                logger.warning("Could not read config at %s, rewriting defaults: %s", self.path, e)
            else:
                config, ignored = _merge(stored)
                return ConfigLoadResult(config, ConfigSource.LOADED, ignored)

            defaults = _defaults()
            write_json(self.path, defaults)
            return ConfigLoadResult(OwnerConfig.model_validate(defaults), ConfigSource.INITIALIZED)

    def load(self) -> OwnerConfig:
        return self.load_or_initialize().config
