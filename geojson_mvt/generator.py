from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from itertools import islice
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple
import logging

from .assigner import TileAssigner
from .config import TilingConfig
from .features import BBox, PointFeature
from .tile_range import TileRange, tile_range
from .tiler import TileBuilder
from .writer import TileWriter

logger = logging.getLogger(__name__)

# tiles in flight per worker before results are drained
BATCH_PER_WORKER = 64


@dataclass
class GenerationStats:
    tiles_built: int = 0
    tiles_written: int = 0
    tiles_empty: int = 0
    per_zoom: Dict[int, int] = field(default_factory=dict)


def _batched(items: Iterable[Tuple[int, int]], size: int) -> Iterator[List[Tuple[int, int]]]:
    it = iter(items)
    while True:
        batch = list(islice(it, size))
        if not batch:
            return
        yield batch


class PointTileGenerator:
    """
    Builds every non-empty tile of the pyramid covering the input bbox.

    For each zoom the tile range of the bbox is resolved and only the tiles
    of that range holding candidate points are built. Tiles are submitted to
    the thread pool in bounded batches and non-empty payloads are handed to
    the writer from the calling thread.
    """

    def __init__(self, features: Sequence[PointFeature], config: TilingConfig, writer: Optional[TileWriter] = None,
                 batch_size: Optional[int] = None):
        self.features = list(features)
        self.config = config
        self.writer = writer
        self.builder = TileBuilder(config)
        self.batch_size = batch_size or max(1, config.workers) * BATCH_PER_WORKER
        logger.info(
            f"Initializing PointTileGenerator: {len(self.features)} features, "
            f"zooms={config.minzoom}..{config.maxzoom}, workers={config.workers}"
        )

    def candidate_tiles(self, assigner: TileAssigner, z: int, rng: TileRange) -> List[Tuple[int, int]]:
        # sorted tuples keep the x-outer, y-inner order of TileRange.tiles()
        return sorted(xy for xy in assigner.buckets[z] if rng.covers(*xy))

    def run(self) -> GenerationStats:
        stats = GenerationStats()
        bbox = BBox.from_features(self.features)
        if bbox is None:
            logger.warning("No input features, nothing to tile")
            return stats
        logger.info(f"Input bbox: {bbox}")

        assigner = TileAssigner(self.config.zooms).assign_all(self.features)

        with ThreadPoolExecutor(max_workers=self.config.workers) as ex:
            for z in self.config.zooms:
                rng = tile_range(bbox, z)
                if rng is None:
                    logger.info(f"Zoom {z}: bbox does not intersect any tile, skipping")
                    continue

                addresses = self.candidate_tiles(assigner, z, rng)
                logger.info(
                    f"Zoom {z}: building {len(addresses)} candidate tiles of {rng.num_tiles} "
                    f"x={rng.x_min}..{rng.x_max} y={rng.y_min}..{rng.y_max}"
                )

                def build(xy, z=z):
                    x, y = xy
                    return self.builder.build(assigner.candidates(z, x, y), z, x, y)

                written = 0
                for batch in _batched(addresses, self.batch_size):
                    for (x, y), data in zip(batch, ex.map(build, batch)):
                        stats.tiles_built += 1
                        if not data:
                            stats.tiles_empty += 1
                            continue
                        if self.writer is not None:
                            self.writer.write(z, x, y, data)
                        written += 1

                stats.tiles_written += written
                stats.per_zoom[z] = written
                logger.info(f"Zoom {z}: {written} non-empty tiles out of {len(addresses)} built")

        logger.info(f"Complete! {stats.tiles_written} tiles written, {stats.tiles_empty} empty tiles skipped")
        return stats
