from __future__ import annotations
from dataclasses import dataclass
import os

from .errors import InvalidZoomRange


DEFAULT_EXTENT = 4096
DEFAULT_LAYER_NAME = "myLayer"
DEFAULT_MINZOOM = 9
DEFAULT_MAXZOOM = 18

# practical upper bound for slippy-map pyramids
MAX_ZOOM = 24


def default_workers() -> int:
    return max(1, min(8, os.cpu_count() or 1))


@dataclass(frozen=True)
class TilingConfig:
    """
    Settings threaded through every tile build.

    - extent: tile-local coordinate range written into each layer.
    - layer_name: name of the single layer in every tile.
    - minzoom / maxzoom: inclusive zoom levels the pyramid covers.
    - clamp_to_extent: clamp projected coordinates into [0, extent - 1] so that
      points on the far tile edge never encode as `extent`.
    - mvt_version: when set, written as the layer `version` field.
    - workers: tile builds running concurrently.
    """
    extent: int = DEFAULT_EXTENT
    layer_name: str = DEFAULT_LAYER_NAME
    minzoom: int = DEFAULT_MINZOOM
    maxzoom: int = DEFAULT_MAXZOOM
    clamp_to_extent: bool = True
    mvt_version: int | None = None
    workers: int = 1

    def __post_init__(self):
        validate_zoom_range(self.minzoom, self.maxzoom)
        if not isinstance(self.extent, int) or self.extent <= 0:
            raise ValueError(f"extent must be a positive integer, got {self.extent!r}")
        if not self.layer_name:
            raise ValueError("layer_name must not be empty")
        if self.mvt_version is not None and self.mvt_version < 1:
            raise ValueError(f"mvt_version must be >= 1, got {self.mvt_version}")
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")

    @property
    def zooms(self) -> range:
        return range(self.minzoom, self.maxzoom + 1)


def validate_zoom_range(minzoom: int, maxzoom: int) -> None:
    if minzoom < 0 or maxzoom < 0:
        raise InvalidZoomRange(f"zoom levels must be non-negative (minzoom={minzoom}, maxzoom={maxzoom})")
    if minzoom > maxzoom:
        raise InvalidZoomRange(f"minzoom {minzoom} is greater than maxzoom {maxzoom}")
    if maxzoom > MAX_ZOOM:
        raise InvalidZoomRange(f"maxzoom {maxzoom} exceeds the supported maximum of {MAX_ZOOM}")
