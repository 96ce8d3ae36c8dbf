import json

import pytest

from geojson_mvt import PointFeature, TilingConfig

TOKYO = (139.767, 35.681)


@pytest.fixture
def tokyo():
    return PointFeature(*TOKYO, properties={"name": "Tokyo Station"})


@pytest.fixture
def config():
    return TilingConfig(minzoom=10, maxzoom=10)


@pytest.fixture
def geojson_file(tmp_path):
    def _write(features, name="points.geojson", extra=None):
        doc = {"type": "FeatureCollection"}
        doc.update(extra or {})
        doc["features"] = features
        path = tmp_path / name
        path.write_text(json.dumps(doc, indent=2), encoding="utf-8")
        return path
    return _write


def _point(lon, lat, **props):
    return {
        "type": "Feature",
        "properties": props,
        "geometry": {"type": "Point", "coordinates": [lon, lat]},
    }


@pytest.fixture
def geojson_point():
    return _point
