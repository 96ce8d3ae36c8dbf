import json

import pytest
from flask import Flask

from geojson_mvt import PointFeature, TilingConfig
from geojson_mvt.server import MVT_MIMETYPE, create_app, main as server_main
from geojson_mvt.verify import decode_tile


@pytest.fixture
def client(tokyo):
    app = create_app([tokyo, PointFeature(139.70, 35.69)], TilingConfig(minzoom=5, maxzoom=12))
    app.config["TESTING"] = True
    return app.test_client()


def test_serves_tile(client):
    resp = client.get("/10/909/403.pbf")
    assert resp.status_code == 200
    assert resp.mimetype == MVT_MIMETYPE
    layer = decode_tile(resp.data)["myLayer"]
    assert len(layer["features"]) >= 1


def test_empty_tile_is_no_content(client):
    resp = client.get("/10/0/0.pbf")
    assert resp.status_code == 204
    assert resp.data == b""


@pytest.mark.parametrize("url", ["/4/0/0.pbf", "/13/0/0.pbf", "/10/1024/0.pbf", "/10/0/1024.pbf"])
def test_out_of_range_is_not_found(client, url):
    assert client.get(url).status_code == 404


def test_cors_header(client):
    resp = client.get("/10/909/403.pbf", headers={"Origin": "http://example.com"})
    # older flask-cors answers with the wildcard, newer releases echo the origin
    assert resp.headers.get("Access-Control-Allow-Origin") in ("*", "http://example.com")


def test_metadata(client):
    meta = client.get("/metadata.json").get_json()
    assert meta["layer"] == "myLayer"
    assert meta["extent"] == 4096
    assert (meta["minzoom"], meta["maxzoom"]) == (5, 12)
    assert meta["features"] == 2
    assert meta["bounds"] == pytest.approx([139.70, 35.681, 139.767, 35.69])


def _write_points(path, coords):
    doc = {
        "type": "FeatureCollection",
        "features": [
            {"type": "Feature", "properties": {}, "geometry": {"type": "Point", "coordinates": list(c)}}
            for c in coords
        ],
    }
    path.write_text(json.dumps(doc), encoding="utf-8")
    return path


def test_main_passes_tile_options(tmp_path, monkeypatch):
    started = []
    monkeypatch.setattr(Flask, "run", lambda self, **kwargs: started.append(self))
    src = _write_points(tmp_path / "map.geojson", [(139.767, 35.681)])

    code = server_main(["--input", str(src), "--minzoom", "10", "--maxzoom", "10", "--mvt-version", "2", "--no-clamp"])

    assert code == 0
    resp = started[0].test_client().get("/10/909/403.pbf")
    assert decode_tile(resp.data)["myLayer"]["version"] == 2


def test_main_rejects_bad_zoom_range(tmp_path, monkeypatch):
    monkeypatch.setattr(Flask, "run", lambda self, **kwargs: pytest.fail("server started"))
    src = _write_points(tmp_path / "map.geojson", [(0.0, 0.0)])
    assert server_main(["--input", str(src), "--minzoom", "8", "--maxzoom", "3"]) == 2


def test_main_reports_missing_input(tmp_path, monkeypatch):
    monkeypatch.setattr(Flask, "run", lambda self, **kwargs: pytest.fail("server started"))
    assert server_main(["--input", str(tmp_path / "nope.geojson")]) == 1
