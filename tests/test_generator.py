import random

from geojson_mvt import BBox, PointFeature, PointTileGenerator, TileBuilder, TilingConfig, TileWriter, tile_range
from geojson_mvt.assigner import TileAssigner
from geojson_mvt.projection import tile_to_lat, tile_to_lon
from geojson_mvt.verify import decode_tile


def _tokyo_cloud(seed=7, count=200, edges=True):
    rnd = random.Random(seed)
    features = [PointFeature(rnd.uniform(139.5, 140.0), rnd.uniform(35.4, 35.9)) for _ in range(count)]
    if not edges:
        return features
    # points sitting exactly on tile edges and corners at z=12
    z = 12
    for x, y in [(3638, 1612), (3640, 1614), (3641, 1613)]:
        features.append(PointFeature(tile_to_lon(x, z), tile_to_lat(y, z)))
        features.append(PointFeature(tile_to_lon(x, z), 35.6))
        features.append(PointFeature(139.75, tile_to_lat(y, z)))
    return features


def test_assigner_candidates_give_same_tiles_as_full_scan():
    features = _tokyo_cloud()
    config = TilingConfig(minzoom=8, maxzoom=12)
    builder = TileBuilder(config)
    assigner = TileAssigner(config.zooms).assign_all(features)
    bbox = BBox.from_features(features)

    for z in config.zooms:
        for x, y in tile_range(bbox, z).tiles():
            assert builder.build(assigner.candidates(z, x, y), z, x, y) == builder.build(features, z, x, y)


def test_assigner_unknown_tile_has_no_candidates():
    assigner = TileAssigner([3]).assign_all([PointFeature(0.5, 0.5)])
    assert assigner.candidates(3, 0, 0) == []
    assert PointFeature(0.5, 0.5) in assigner.candidates(3, 4, 3)


def test_generator_writes_non_empty_tiles(tmp_path):
    features = _tokyo_cloud(count=50, edges=False)
    config = TilingConfig(minzoom=9, maxzoom=11, workers=4)
    writer = TileWriter(tmp_path, extension="pbf")

    stats = PointTileGenerator(features, config, writer).run()

    files = sorted(tmp_path.rglob("*.pbf"))
    assert len(files) == stats.tiles_written == writer.written
    assert stats.tiles_built == stats.tiles_written + stats.tiles_empty
    assert set(stats.per_zoom) == {9, 10, 11}
    assert sum(stats.per_zoom.values()) == stats.tiles_written

    total_points = 0
    for path in tmp_path.glob("9/*/*.pbf"):
        data = path.read_bytes()
        assert data
        total_points += len(decode_tile(data)["myLayer"]["features"])
    # no feature sits on a z9 edge, so each point appears once
    assert total_points == len(features)


def test_generator_output_matches_single_tile_builds(tmp_path):
    features = [PointFeature(139.767, 35.681), PointFeature(139.70, 35.69)]
    config = TilingConfig(minzoom=10, maxzoom=10, workers=2)
    PointTileGenerator(features, config, TileWriter(tmp_path)).run()

    written = tmp_path / "10" / "909" / "403.pbf"
    assert written.read_bytes() == TileBuilder(config).build(features, 10, 909, 403)


def test_generator_without_features(tmp_path):
    stats = PointTileGenerator([], TilingConfig(minzoom=0, maxzoom=2), TileWriter(tmp_path)).run()
    assert stats.tiles_built == 0
    assert list(tmp_path.iterdir()) == []


def test_writer_layout(tmp_path):
    writer = TileWriter(tmp_path / "out", extension=".mvt")
    path = writer.write(3, 4, 5, b"\x1a\x00")
    assert path == tmp_path / "out" / "3" / "4" / "5.mvt"
    assert path.read_bytes() == b"\x1a\x00"


def _recording_generator(features, config, tmp_path, events, batch_size=None):
    class RecordingWriter(TileWriter):
        def write(self, z, x, y, data):
            events.append(("write", z, x, y))
            return super().write(z, x, y, data)

    gen = PointTileGenerator(features, config, RecordingWriter(tmp_path), batch_size=batch_size)
    build = gen.builder.build

    def recording_build(candidates, z, x, y):
        events.append(("build", z, x, y))
        return build(candidates, z, x, y)

    gen.builder.build = recording_build
    return gen


def test_generator_builds_only_candidate_tiles(tmp_path):
    # Tokyo and Osaka
    features = [PointFeature(139.767, 35.681), PointFeature(135.50, 34.69)]
    config = TilingConfig(minzoom=12, maxzoom=12, workers=1)
    events = []

    stats = _recording_generator(features, config, tmp_path, events).run()

    builds = [e for e in events if e[0] == "build"]
    # at most the 3x3 neighbourhood of each point, far fewer than the bbox rectangle
    assert len(builds) == stats.tiles_built <= 18
    assert tile_range(BBox.from_features(features), 12).num_tiles > 18
    assert stats.tiles_written == 2
    assert builds == sorted(builds)


def test_generator_writes_each_batch_before_submitting_the_next(tmp_path):
    features = _tokyo_cloud(count=20, edges=False)
    config = TilingConfig(minzoom=11, maxzoom=11, workers=1)
    events = []

    stats = _recording_generator(features, config, tmp_path, events, batch_size=1).run()

    assert stats.tiles_written > 0
    for i, event in enumerate(events):
        if event[0] == "write":
            assert events[i - 1] == ("build",) + event[1:]
