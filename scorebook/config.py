"""Dashboard and engine settings, optionally read from a YAML or JSON file."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Tuple

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScorebookConfig:
    # Substrings that identify our own team in the home-team column
    home_team_aliases: Tuple[str, ...] = ()
    unknown_opponent: str = "unknown"
    data_folder: str = "data"
    default_start_date: str = ""
    default_end_date: str = ""
    min_plate_appearances: float = 0
    min_innings: float = 0

    def __post_init__(self):
        aliases = self.home_team_aliases
        if isinstance(aliases, str):
            aliases = (aliases,)
        cleaned = tuple(str(a).strip() for a in (aliases or ()) if str(a).strip())
        object.__setattr__(self, "home_team_aliases", cleaned)

    def to_dict(self) -> dict:
        return asdict(self)


def load_config(path="scorebook.yaml") -> ScorebookConfig:
    """Load settings from ``path``; a missing file yields the defaults."""
    path = Path(path)
    if not path.is_file():
        logger.debug("No config at %s, using defaults", path)
        return ScorebookConfig()

    try:
        content = path.read_text(encoding="utf-8")
        if path.suffix == ".json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e

    data = data or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config in {path} must be a mapping, got {type(data).__name__}")
    known = {f.name for f in fields(ScorebookConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config key(s) in {path}: {', '.join(unknown)}")

    logger.info("Loaded config from %s", path)
    return ScorebookConfig(**data)
