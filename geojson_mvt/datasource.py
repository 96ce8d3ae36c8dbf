from typing import Any, Dict, Iterable, List, Optional, Tuple
import json
import logging

import ijson
from shapely.errors import GeometryTypeError
from shapely.geometry import Point, shape

from .errors import InvalidInput, UnsupportedGeometry
from .features import PointFeature

logger = logging.getLogger(__name__)

# CRS names that mean plain lon/lat degrees
_WGS84_NAMES = {
    "epsg:4326",
    "urn:ogc:def:crs:epsg::4326",
    "urn:ogc:def:crs:ogc:1.3:crs84",
    "urn:ogc:def:crs:ogc::crs84",
    "crs84",
}


def is_geojson_path(path: str) -> bool:
    p = str(path).lower()
    return p.endswith((".geojson", ".geojsonl", ".json", ".jsonl"))


class GeoJSONSource:
    """
    Streams point features out of a GeoJSON FeatureCollection or a GeoJSON
    Lines file (one Feature per line).

    FeatureCollections are read with `ijson` so the whole document never sits
    in memory. Coordinates are always taken as lon/lat degrees.
    """

    def __init__(self, path: str):
        self.path = str(path)
        self._use_geojsonl, crs_hint = _scan_header(self.path)
        if crs_hint and crs_hint.lower() not in _WGS84_NAMES:
            logger.warning(
                "GeoJSON %s declares CRS %s; coordinates will be read as WGS84 lon/lat anyway.",
                self.path, crs_hint,
            )
        logger.info(
            "GeoJSONSource opened %s (%s)",
            self.path, "GeoJSON Lines" if self._use_geojsonl else "FeatureCollection",
        )

    def iter_raw_features(self) -> Iterable[Dict[str, Any]]:
        if self._use_geojsonl:
            yield from _iter_geojsonl_features(self.path)
        else:
            yield from _iter_feature_collection(self.path)

    def iter_features(self) -> Iterable[PointFeature]:
        skipped = 0
        for index, raw in enumerate(self.iter_raw_features()):
            feature = feature_from_geojson(raw, index)
            if feature is None:
                skipped += 1
                continue
            yield feature
        if skipped:
            logger.info("Skipped %d features without geometry in %s", skipped, self.path)


def feature_from_geojson(raw: Dict[str, Any], index: int = 0) -> Optional[PointFeature]:
    geometry = raw.get("geometry")
    if geometry is None:
        logger.debug("Feature %d has null geometry, skipping", index)
        return None

    try:
        geom = shape(geometry)
    except GeometryTypeError as e:
        raise UnsupportedGeometry(f"feature {index}: {e}") from e
    if not isinstance(geom, Point) or geom.is_empty:
        raise UnsupportedGeometry(f"feature {index}: only Point geometries are supported, got {geom.geom_type}")

    return PointFeature(
        longitude=float(geom.x),
        latitude=float(geom.y),
        properties=raw.get("properties") or {},
    )


def load_features(path: str) -> List[PointFeature]:
    features = list(GeoJSONSource(path).iter_features())
    logger.info("Loaded %d point features from %s", len(features), path)
    return features


# ------------------------- Readers ------------------------- #
def _iter_feature_collection(path: str) -> Iterable[Dict[str, Any]]:
    with open(path, "rb") as fin:
        try:
            yield from ijson.items(fin, "features.item", use_float=True)
        except ijson.JSONError as e:
            raise InvalidInput(f"{path}: not a GeoJSON FeatureCollection ({e})") from e


def _iter_geojsonl_features(path: str) -> Iterable[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as fin:
        for lineno, line in enumerate(fin, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError as e:
                raise InvalidInput(f"{path}:{lineno}: {e}") from e


def _scan_header(path: str) -> Tuple[bool, Optional[str]]:
    """
    Stream the first top-level JSON value of the file and return
    (is_geojson_lines, crs_name).

    The scan stops at the first top-level "features" key (FeatureCollection),
    at a top-level "type": "Feature" or at the end of the first object, so a
    large first feature or a huge collection is never held in memory.
    """
    crs_name = None
    with open(path, "rb") as fin:
        try:
            for prefix, event, value in ijson.parse(fin, multiple_values=True):
                if prefix == "crs.properties.name" and event == "string":
                    crs_name = value
                elif prefix == "type" and event == "string" and value == "Feature":
                    return True, None
                elif prefix == "":
                    if event == "map_key" and value == "features":
                        return False, crs_name
                    if event == "start_array":
                        return False, None
                    if event == "end_map":
                        # an object without "features" is a single feature
                        return True, None
        except ijson.JSONError as e:
            raise InvalidInput(f"{path}: not valid JSON ({e})") from e
    return False, crs_name
