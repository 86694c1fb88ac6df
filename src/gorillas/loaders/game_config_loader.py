"""Game configuration — loads tunable constants from config/game.yaml.

Provides a single ``GameConfig`` dataclass that is loaded once at startup
and then passed (or injected) wherever constants are needed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

import yaml

log = logging.getLogger(__name__)

DEFAULT_GAME_CONFIG_PATH = "config/game.yaml"


@dataclass
class CityLayout:
    """Ranges used by the world generator (world units)."""
    building_count: int = 8
    building_gap: float = 4.0
    min_width: float = 80.0
    max_width: float = 130.0
    min_height: float = 40.0
    max_height: float = 300.0
    platform_indices: Tuple[int, ...] = (1, 6)
    min_platform_height: float = 30.0
    max_platform_height: float = 150.0
    window_count: int = 50
    window_lit_chance: float = 0.33

    # Cosmetic skyline behind the playable city
    background_count: int = 11
    background_start_x: float = -30.0
    background_min_width: float = 60.0
    background_max_width: float = 110.0
    background_min_height: float = 80.0
    background_max_height: float = 350.0


@dataclass
class AIConfig:
    """Monte-Carlo throw search parameters."""
    base_trials: int = 2
    trials_per_round: int = 3
    min_angle_deg: float = 0.0
    max_angle_deg: float = 90.0
    min_speed: float = 40.0
    max_speed: float = 140.0
    search_tick_ms: float = 16.0
    max_iterations: int = 5000
    target_height_offset: float = 30.0
    fallback_velocity: Tuple[float, float] = (0.0, 1.0)


@dataclass
class GameConfig:
    """All tunable gameplay constants.

    Loaded from ``config/game.yaml``.  Every field has a sensible default
    so the engine can start even without the file.
    """

    # -- Physics -----------------------------------------------------
    substeps: int = 10
    gravity: float = 20.0
    time_unit_ms: float = 200.0
    projectile_margin: float = 4.0
    blast_hole_radius: float = 18.0
    field_width: Optional[float] = None   # None = right edge of the city
    field_height: Optional[float] = None

    # -- Gorillas ----------------------------------------------------
    hand_offset_x: float = 28.0
    hand_offset_y: float = 107.0

    # -- Pacing ------------------------------------------------------
    tick_interval_ms: float = 16.0
    computer_think_delay_ms: float = 1000.0

    # -- Misc --------------------------------------------------------
    seed: Optional[int] = None
    log_level: str = "INFO"

    city: CityLayout = field(default_factory=CityLayout)
    ai: AIConfig = field(default_factory=AIConfig)

    def __post_init__(self) -> None:
        if self.substeps < 1:
            raise ValueError(f"substeps must be >= 1, got {self.substeps}")
        if self.time_unit_ms <= 0:
            raise ValueError(f"time_unit_ms must be positive, got {self.time_unit_ms}")
        if self.ai.max_iterations < 1:
            raise ValueError(f"ai.max_iterations must be >= 1, got {self.ai.max_iterations}")

    @property
    def hand_offset(self) -> tuple[float, float]:
        return self.hand_offset_x, self.hand_offset_y


def _section(cls, raw: object):
    """Build a nested config dataclass, ignoring unknown keys."""
    if not isinstance(raw, dict):
        return cls()
    kwargs = {k: v for k, v in raw.items() if k in cls.__dataclass_fields__}
    # YAML has no tuples
    for key, value in kwargs.items():
        if isinstance(value, list):
            kwargs[key] = tuple(value)
    return cls(**kwargs)


def load_game_config(path: str | Path = DEFAULT_GAME_CONFIG_PATH) -> GameConfig:
    """Load game configuration from a YAML file.

    Missing keys fall back to dataclass defaults.  If the file does not
    exist, a warning is logged and pure defaults are returned.
    """
    p = Path(path)
    if not p.exists():
        log.warning("Game config not found at %s — using defaults", p)
        return GameConfig()

    with p.open() as f:
        raw = yaml.safe_load(f) or {}

    log.info("Loaded game config from %s (%d keys)", p, len(raw))

    city = _section(CityLayout, raw.pop("city", None))
    ai = _section(AIConfig, raw.pop("ai", None))

    cfg = GameConfig(city=city, ai=ai, **{
        k: v for k, v in raw.items()
        if k in GameConfig.__dataclass_fields__
    })
    return cfg
