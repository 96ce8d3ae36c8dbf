import argparse
import logging
import sys
from time import perf_counter

from .config import DEFAULT_EXTENT, DEFAULT_LAYER_NAME, DEFAULT_MAXZOOM, DEFAULT_MINZOOM, TilingConfig, default_workers
from .datasource import is_geojson_path, load_features
from .errors import TilingError
from .generator import PointTileGenerator
from .writer import TileWriter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="GeoJSON points -> Mapbox Vector Tile pyramid (<outdir>/<z>/<x>/<y>.pbf)."
    )
    ap.add_argument("--input", required=True, help="Path to a GeoJSON FeatureCollection or GeoJSON Lines file.")
    ap.add_argument("--outdir", required=True, help="Output directory for tiles.")
    ap.add_argument("--minzoom", type=int, default=DEFAULT_MINZOOM, help=f"First zoom level (default {DEFAULT_MINZOOM}).")
    ap.add_argument("--maxzoom", type=int, default=DEFAULT_MAXZOOM, help=f"Last zoom level (default {DEFAULT_MAXZOOM}).")
    ap.add_argument("--extent", type=int, default=DEFAULT_EXTENT, help=f"Tile coordinate extent (default {DEFAULT_EXTENT}).")
    ap.add_argument("--layer-name", default=DEFAULT_LAYER_NAME, help=f"Layer name (default {DEFAULT_LAYER_NAME}).")
    ap.add_argument("--mvt-version", type=int, default=None,
                    help="Write this value as the layer version field (omitted by default).")
    ap.add_argument("--no-clamp", action="store_true",
                    help="Keep edge-exact coordinates at `extent` instead of clamping to extent - 1.")
    ap.add_argument("--workers", type=int, default=default_workers(), help="Tiles built concurrently.")
    ap.add_argument("--extension", default="pbf", help="Tile file extension (default pbf).")
    ap.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING, ERROR)")
    return ap


def config_from_args(args) -> TilingConfig:
    return TilingConfig(
        extent=args.extent,
        layer_name=args.layer_name,
        minzoom=args.minzoom,
        maxzoom=args.maxzoom,
        clamp_to_extent=not args.no_clamp,
        mvt_version=args.mvt_version,
        workers=args.workers,
    )


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    level = getattr(logging, args.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    try:
        config = config_from_args(args)
    except (TilingError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    if not is_geojson_path(args.input):
        logger.warning(f"{args.input} does not look like a GeoJSON file, trying anyway")

    logger.info(f"Starting MVT generation: input={args.input}, outdir={args.outdir}, zooms={config.minzoom}..{config.maxzoom}")
    start = perf_counter()
    try:
        features = load_features(args.input)
        stats = PointTileGenerator(features, config, TileWriter(args.outdir, args.extension)).run()
    except TilingError as e:
        logger.error(f"Tiling failed: {e}")
        return 1
    except OSError as e:
        logger.error(f"Cannot read {args.input} or write {args.outdir}: {e}")
        return 1

    logger.info(
        "MVT generation completed in %.2f seconds: %d tiles written",
        perf_counter() - start, stats.tiles_written,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
