from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, NamedTuple, Optional
import math

from .errors import InvalidCoordinate


def check_lonlat(lon: float, lat: float) -> None:
    """Raise InvalidCoordinate unless (lon, lat) can be projected to Web Mercator."""
    if not (math.isfinite(lon) and math.isfinite(lat)):
        raise InvalidCoordinate(f"non-finite coordinate ({lon}, {lat})")
    if not -180.0 <= lon <= 180.0:
        raise InvalidCoordinate(f"longitude {lon} outside [-180, 180]")
    # the poles map to +/- infinity in spherical Mercator
    if not -90.0 < lat < 90.0:
        raise InvalidCoordinate(f"latitude {lat} outside (-90, 90)")


@dataclass(frozen=True)
class PointFeature:
    """
    A single input point in WGS84 degrees.

    `properties` are kept so callers can inspect them, but tiles never encode
    them: layers are written without keys/values and features without tags.
    """
    longitude: float
    latitude: float
    properties: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        check_lonlat(self.longitude, self.latitude)


class BBox(NamedTuple):
    west: float
    south: float
    east: float
    north: float

    def contains(self, lon: float, lat: float) -> bool:
        # inclusive on every edge, so points on a shared tile edge land in both tiles
        return self.west <= lon <= self.east and self.south <= lat <= self.north

    @classmethod
    def from_features(cls, features: Iterable[PointFeature]) -> Optional["BBox"]:
        west = south = math.inf
        east = north = -math.inf
        seen = False
        for f in features:
            seen = True
            west = min(west, f.longitude)
            east = max(east, f.longitude)
            south = min(south, f.latitude)
            north = max(north, f.latitude)
        if not seen:
            return None
        return cls(west, south, east, north)
