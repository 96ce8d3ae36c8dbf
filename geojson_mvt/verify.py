import argparse
import json
from collections import Counter
from pathlib import Path

import mapbox_vector_tile


def decode_tile(data: bytes) -> dict:
    """Decode a payload into {layer_name: layer}, with y kept as encoded (0 = north)."""
    if not data:
        return {}
    return mapbox_vector_tile.decode(data, default_options={"y_coord_down": True})


def summarize_tile(data: bytes) -> dict:
    summary = {}
    for name, layer in decode_tile(data).items():
        types = Counter(f["geometry"]["type"] for f in layer["features"])
        summary[name] = {
            "extent": layer["extent"],
            "features": len(layer["features"]),
            "geometry_types": dict(types),
        }
    return summary


def main(argv=None):
    ap = argparse.ArgumentParser(description="Decode an MVT tile file and print a summary.")
    ap.add_argument("tile", help="Path to a .pbf/.mvt tile.")
    ap.add_argument("--features", action="store_true", help="Also print every decoded feature.")
    args = ap.parse_args(argv)

    data = Path(args.tile).read_bytes()
    print(json.dumps(summarize_tile(data), indent=2))
    if args.features:
        for name, layer in decode_tile(data).items():
            print(f"\n=== Layer: {name} ===")
            for feature in layer["features"]:
                print(json.dumps(feature["geometry"]))


if __name__ == "__main__":
    main()
