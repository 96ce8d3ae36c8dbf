from typing import Tuple

from .projection import geo_bbox_of_tile, mercator_bbox_of_tile, project_to_tile_coordinates


def check_tile_address(z: int, x: int, y: int) -> None:
    if z < 0:
        raise ValueError(f"zoom must be non-negative, got {z}")
    n = 2 ** z
    if not (0 <= x < n and 0 <= y < n):
        raise ValueError(f"tile {z}/{x}/{y} outside [0, {n - 1}]")


class TileBounds:
    def __init__(self, z, x, y):
        check_tile_address(z, x, y)
        self.z = z
        self.x = x
        self.y = y
        self.bbox_4326 = geo_bbox_of_tile(z, x, y)
        self.bbox_3857 = mercator_bbox_of_tile(z, x, y)

    def __repr__(self):
        return f"TileBounds(z={self.z}, x={self.x}, y={self.y})"

    def contains(self, lon, lat):
        return self.bbox_4326.contains(lon, lat)

    def to_tile_coords(self, lon, lat, extent, clamp=True) -> Tuple[int, int]:
        xt, yt = project_to_tile_coordinates(lon, lat, extent, self.bbox_3857)
        if clamp:
            xt = max(0, min(xt, extent - 1))
            yt = max(0, min(yt, extent - 1))
        return xt, yt
