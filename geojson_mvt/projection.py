"""
Spherical Web-Mercator math for slippy-map tiles.

Longitude/latitude in degrees -> Mercator meters -> tile-local integer
coordinates, plus the tile-corner formulas used to derive a tile's bbox.
Tile rows grow southward: row `y` is the north edge of a tile, `y + 1` its
south edge.
"""
from __future__ import annotations
import math
from typing import Tuple

from .errors import InvalidCoordinate
from .features import BBox

# half the Web-Mercator world width in meters
ORIGIN_SHIFT = 20037508.34

MercatorBBox = Tuple[float, float, float, float]


def lonlat_to_mercator_meters(lon: float, lat: float) -> Tuple[float, float]:
    if not (math.isfinite(lon) and math.isfinite(lat)):
        raise InvalidCoordinate(f"non-finite coordinate ({lon}, {lat})")
    if not -90.0 < lat < 90.0:
        raise InvalidCoordinate(f"latitude {lat} has no Mercator y")

    x = lon * ORIGIN_SHIFT / 180.0
    y = math.log(math.tan((90.0 + lat) * math.pi / 360.0)) / (math.pi / 180.0)
    y = y * ORIGIN_SHIFT / 180.0
    return x, y


def tile_to_lon(x: int, z: int) -> float:
    return x / 2 ** z * 360.0 - 180.0


def tile_to_lat(y: int, z: int) -> float:
    n = math.pi - 2.0 * math.pi * y / 2 ** z
    return math.degrees(math.atan(math.sinh(n)))


def geo_bbox_of_tile(z: int, x: int, y: int) -> BBox:
    return BBox(
        west=tile_to_lon(x, z),
        south=tile_to_lat(y + 1, z),
        east=tile_to_lon(x + 1, z),
        north=tile_to_lat(y, z),
    )


def mercator_bbox_of_tile(z: int, x: int, y: int) -> MercatorBBox:
    west, south, east, north = geo_bbox_of_tile(z, x, y)
    minx, miny = lonlat_to_mercator_meters(west, south)
    maxx, maxy = lonlat_to_mercator_meters(east, north)
    return minx, miny, maxx, maxy


def project_to_tile_coordinates(lon: float, lat: float, extent: int, merc_bbox: MercatorBBox) -> Tuple[int, int]:
    """
    Map a lon/lat into the tile-local grid described by `merc_bbox`.

    North maps to 0 and south to `extent`. The result is floored, so a point
    exactly on the east or south edge comes out as `extent`; clamping is left
    to the caller.
    """
    minx, miny, maxx, maxy = merc_bbox
    mx, my = lonlat_to_mercator_meters(lon, lat)

    x_rel = (mx - minx) / (maxx - minx)
    y_rel = (maxy - my) / (maxy - miny)
    return math.floor(x_rel * extent), math.floor(y_rel * extent)
