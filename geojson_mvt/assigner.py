import logging
from collections import defaultdict

from .tile_range import lat_to_tile_y, lon_to_tile_x

logger = logging.getLogger(__name__)


class TileAssigner:
    """
    Buckets features per zoom under the tile their index formula points at and
    the eight tiles around it.

    Edge points belong to more than one tile, and the index formulas and the
    tile-corner formulas can disagree in the last bit, so the neighbourhood is
    kept generous. Buckets only narrow what a tile build scans; the exact
    containment test still runs in TileBuilder.
    """

    def __init__(self, zooms):
        logger.debug(f"Initializing TileAssigner: zooms={list(zooms)}")
        self.zooms = list(zooms)
        self.buckets = {z: defaultdict(list) for z in self.zooms}

    def assign(self, feature):
        for z in self.zooms:
            max_index = 2 ** z - 1
            tx = lon_to_tile_x(feature.longitude, z)
            ty = lat_to_tile_y(feature.latitude, z)
            bucket = self.buckets[z]
            for x in range(max(0, tx - 1), min(max_index, tx + 1) + 1):
                for y in range(max(0, ty - 1), min(max_index, ty + 1) + 1):
                    bucket[(x, y)].append(feature)

    def assign_all(self, features):
        count = 0
        for f in features:
            self.assign(f)
            count += 1
        logger.info(f"Assigned {count} features across {len(self.zooms)} zoom levels")
        return self

    def candidates(self, z, x, y):
        return self.buckets[z].get((x, y), [])
