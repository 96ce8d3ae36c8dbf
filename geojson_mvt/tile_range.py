from __future__ import annotations
import math
from typing import Iterator, NamedTuple, Optional, Tuple

from .features import BBox


def lon_to_tile_x(lon: float, z: int) -> int:
    return math.floor((lon + 180.0) / 360.0 * 2 ** z)


def lat_to_tile_y(lat: float, z: int) -> int:
    lat_rad = math.radians(lat)
    return math.floor((1.0 - math.asinh(math.tan(lat_rad)) / math.pi) / 2.0 * 2 ** z)


class TileRange(NamedTuple):
    """Inclusive rectangle of tile indices at one zoom level."""
    x_min: int
    x_max: int
    y_min: int
    y_max: int

    @property
    def num_tiles(self) -> int:
        return (self.x_max - self.x_min + 1) * (self.y_max - self.y_min + 1)

    def covers(self, x: int, y: int) -> bool:
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max

    def tiles(self) -> Iterator[Tuple[int, int]]:
        for x in range(self.x_min, self.x_max + 1):
            for y in range(self.y_min, self.y_max + 1):
                yield x, y


def tile_range(bbox: BBox, z: int) -> Optional[TileRange]:
    """
    Tile indices at zoom `z` intersecting `bbox`, or None when there are none.

    Rows grow southward, so the north edge gives `y_min` and the south edge
    `y_max`. Every index is clamped into [0, 2**z - 1].
    """
    west, south, east, north = bbox
    max_index = 2 ** z - 1

    def clamp(i):
        return max(0, min(i, max_index))

    x_min = clamp(lon_to_tile_x(west, z))
    x_max = clamp(lon_to_tile_x(east, z))
    y_min = clamp(lat_to_tile_y(north, z))
    y_max = clamp(lat_to_tile_y(south, z))

    if x_min > x_max or y_min > y_max:
        return None
    return TileRange(x_min, x_max, y_min, y_max)
