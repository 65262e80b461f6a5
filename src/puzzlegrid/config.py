from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict

from puzzlegrid.constants import (
    COLLAPSE_DURATION,
    GRID_HEIGHT,
    GRID_WIDTH,
    MIN_GROUP_SIZE,
    MOVE_BUDGET,
    PALETTE_SIZE,
    POINTS_PER_TILE,
    REFILL_DURATION,
    REFILL_SPAWN_OFFSET,
)

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a configuration value is missing or out of range."""


@dataclass(slots=True)
class GridConfig:
    """Configuration for one puzzle session.

    All parameters have defaults from constants.py but can be overridden.
    """

    # Board
    width: int = GRID_WIDTH
    height: int = GRID_HEIGHT
    palette_size: int = PALETTE_SIZE

    # Move rules
    min_group_size: int = MIN_GROUP_SIZE
    reshuffle_on_stalemate: bool = True

    # Animation
    refill_spawn_offset: float = REFILL_SPAWN_OFFSET
    collapse_duration: float = COLLAPSE_DURATION
    refill_duration: float = REFILL_DURATION

    # Scoring
    move_budget: int = MOVE_BUDGET
    points_per_tile: int = POINTS_PER_TILE

    seed: int | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(f"grid must be at least 1x1, got {self.width}x{self.height}")
        if self.palette_size <= 0:
            raise ConfigError(f"palette_size must be positive, got {self.palette_size}")
        if self.min_group_size <= 0:
            raise ConfigError(f"min_group_size must be positive, got {self.min_group_size}")
        if self.min_group_size > self.width * self.height:
            raise ConfigError(
                f"min_group_size {self.min_group_size} exceeds the {self.width}x{self.height} grid"
            )
        if self.refill_spawn_offset < 0:
            raise ConfigError("refill_spawn_offset cannot be negative")
        if self.collapse_duration < 0 or self.refill_duration < 0:
            raise ConfigError("animation durations cannot be negative")
        if self.move_budget <= 0:
            raise ConfigError(f"move_budget must be positive, got {self.move_budget}")
        if self.points_per_tile < 0:
            raise ConfigError("points_per_tile cannot be negative")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GridConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
        try:
            return cls(**{k: v for k, v in data.items() if k in known})
        except TypeError as exc:
            raise ConfigError(str(exc)) from exc


def load_config(path: str | Path) -> GridConfig:
    """Read a GridConfig from a JSON file."""
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"cannot read config {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"config {path} must contain a JSON object")
    return GridConfig.from_dict(raw)
