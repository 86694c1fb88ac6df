"""World generator — builds the skyline for a new game.

Buildings are packed left to right with a fixed gap, the first one at
x=0.  The two buildings the gorillas stand on (index 1 and 6 of 8) use a
lower height range so that each gorilla stays reachable.

All randomness comes from the injected ``random.Random``; with a fixed
seed the generated city is reproducible.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from gorillas.models.city import Building, City

if TYPE_CHECKING:
    from gorillas.loaders.game_config_loader import CityLayout

log = logging.getLogger(__name__)


class WorldGenerator:
    """Procedural city generator.

    Args:
        layout: Building count and size ranges.
        rng: Random source; a fresh unseeded one when omitted.
    """

    def __init__(self, layout: CityLayout, rng: random.Random | None = None) -> None:
        self._layout = layout
        self._rng = rng or random.Random()

    def generate(self) -> City:
        """Generate a complete city (background first, then playable buildings)."""
        background = self._background_buildings()
        buildings: list[Building] = []
        for index in range(self._layout.building_count):
            buildings.append(self._building(index, buildings[-1] if buildings else None))
        city = City(tuple(buildings), tuple(background))
        log.debug("Generated city: width=%.1f heights=%s",
                  city.width, [round(b.height) for b in city.buildings])
        return city

    # -- Internal --------------------------------------------------------

    def _uniform(self, low: float, high: float) -> float:
        return low + self._rng.random() * (high - low)

    def _building(self, index: int, previous: Building | None) -> Building:
        layout = self._layout
        x = previous.right + layout.building_gap if previous else 0.0
        width = self._uniform(layout.min_width, layout.max_width)
        if index in layout.platform_indices:
            height = self._uniform(layout.min_platform_height, layout.max_platform_height)
        else:
            height = self._uniform(layout.min_height, layout.max_height)
        lights_on = tuple(
            self._rng.random() <= layout.window_lit_chance
            for _ in range(layout.window_count)
        )
        return Building(x, width, height, lights_on)

    def _background_buildings(self) -> list[Building]:
        layout = self._layout
        result: list[Building] = []
        x = layout.background_start_x
        for _ in range(layout.background_count):
            width = self._uniform(layout.background_min_width, layout.background_max_width)
            height = self._uniform(layout.background_min_height, layout.background_max_height)
            result.append(Building(x, width, height))
            x += width + layout.building_gap
        return result
