from __future__ import annotations
import argparse
import logging
import sys

from flask import Flask, Response, abort, jsonify
from flask_cors import CORS

from .assigner import TileAssigner
from .config import DEFAULT_EXTENT, DEFAULT_LAYER_NAME, DEFAULT_MAXZOOM, DEFAULT_MINZOOM, TilingConfig
from .datasource import load_features
from .errors import TilingError
from .features import BBox
from .tiler import TileBuilder

logger = logging.getLogger(__name__)

MVT_MIMETYPE = "application/vnd.mapbox-vector-tile"


def create_app(features, config: TilingConfig | None = None) -> Flask:
    """Flask app that builds tiles for `features` on request."""
    config = config or TilingConfig()
    features = list(features)
    bbox = BBox.from_features(features)
    builder = TileBuilder(config)
    assigner = TileAssigner(config.zooms).assign_all(features)

    app = Flask(__name__)
    CORS(app, resources={r"/*": {"origins": "*"}})

    @app.get("/<int:z>/<int:x>/<int:y>.pbf")
    def serve_tile(z, x, y):
        if z < config.minzoom or z > config.maxzoom:
            abort(404)
        if not (0 <= x < 2 ** z and 0 <= y < 2 ** z):
            abort(404)

        tile_bytes = builder.build(assigner.candidates(z, x, y), z, x, y)
        if not tile_bytes:
            return Response(status=204)
        return Response(tile_bytes, mimetype=MVT_MIMETYPE)

    @app.get("/metadata.json")
    def metadata():
        return jsonify({
            "layer": config.layer_name,
            "extent": config.extent,
            "minzoom": config.minzoom,
            "maxzoom": config.maxzoom,
            "bounds": list(bbox) if bbox else None,
            "features": len(features),
        })

    return app


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Serve MVT tiles built on the fly from a GeoJSON point file.")
    ap.add_argument("--input", required=True, help="Path to a GeoJSON FeatureCollection or GeoJSON Lines file.")
    ap.add_argument("--minzoom", type=int, default=DEFAULT_MINZOOM)
    ap.add_argument("--maxzoom", type=int, default=DEFAULT_MAXZOOM)
    ap.add_argument("--extent", type=int, default=DEFAULT_EXTENT)
    ap.add_argument("--layer-name", default=DEFAULT_LAYER_NAME)
    ap.add_argument("--mvt-version", type=int, default=None,
                    help="Write this value as the layer version field (omitted by default).")
    ap.add_argument("--no-clamp", action="store_true",
                    help="Keep edge-exact coordinates at `extent` instead of clamping to extent - 1.")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=5000)
    ap.add_argument("--debug", action="store_true")
    ap.add_argument("--log-level", default="INFO")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    level = getattr(logging, args.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    try:
        config = TilingConfig(
            extent=args.extent,
            layer_name=args.layer_name,
            minzoom=args.minzoom,
            maxzoom=args.maxzoom,
            clamp_to_extent=not args.no_clamp,
            mvt_version=args.mvt_version,
        )
    except (TilingError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    try:
        app = create_app(load_features(args.input), config)
    except (TilingError, OSError) as e:
        logger.error(f"Cannot load {args.input}: {e}")
        return 1

    logger.info(f"Serving {args.input} on http://{args.host}:{args.port}/<z>/<x>/<y>.pbf")
    app.run(host=args.host, port=args.port, debug=args.debug)
    return 0


if __name__ == "__main__":
    sys.exit(main())
