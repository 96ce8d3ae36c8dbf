import logging
from typing import Iterable, Optional

from shapely.geometry import Point

from .config import TilingConfig
from .features import PointFeature, check_lonlat
from .mvt_encoder import MVTEncoder
from .tiler_bounds import TileBounds

logger = logging.getLogger(__name__)


class TileBuilder:
    """
    Builds the payload of one tile from a list of point features.

    Holds only the immutable config, so a single instance can be shared by
    worker threads.
    """

    def __init__(self, config: Optional[TilingConfig] = None):
        self.config = config or TilingConfig()
        self.encoder = MVTEncoder(self.config)

    def select(self, features: Iterable[PointFeature], bounds: TileBounds):
        out = []
        for f in features:
            # features built without PointFeature validation still fail loudly here
            check_lonlat(f.longitude, f.latitude)
            if bounds.contains(f.longitude, f.latitude):
                out.append(f)
        return out

    def to_tile_features(self, features, bounds: TileBounds):
        extent = self.config.extent
        clamp = self.config.clamp_to_extent
        tile_features = []
        for f in features:
            xt, yt = bounds.to_tile_coords(f.longitude, f.latitude, extent, clamp=clamp)
            tile_features.append({
                "geometry": Point(xt, yt),
                "properties": f.properties,
            })
        return tile_features

    def build(self, features: Iterable[PointFeature], z: int, x: int, y: int) -> bytes:
        bounds = TileBounds(z, x, y)
        selected = self.select(features, bounds)

        if not selected:
            logger.debug(f"No features for tile z={z} x={x} y={y}")
            return self.encoder.empty_tile()

        tile_features = self.to_tile_features(selected, bounds)
        data = self.encoder.encode(tile_features)
        logger.debug(f"Encoded tile z={z} x={x} y={y}: {len(tile_features)} features, {len(data)} bytes")
        return data


def build_tile(features, z, x, y, config: Optional[TilingConfig] = None) -> bytes:
    return TileBuilder(config).build(features, z, x, y)
