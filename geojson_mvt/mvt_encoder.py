"""
Hand-written Mapbox Vector Tile encoder for point layers.

Message layout written here (field numbers from vector_tile.proto):

    Tile.layers      = 3   (length-delimited Layer)
    Layer.name       = 1   (string)
    Layer.features   = 2   (length-delimited Feature)
    Layer.extent     = 5   (varint)
    Layer.version    = 15  (varint, only when requested)
    Feature.type     = 3   (varint GeomType)
    Feature.geometry = 4   (packed uint32 commands)

A tile payload is the concatenation of framed layers, which is a valid Tile
message since `layers` is its only field. Feature properties are dropped on
purpose: no Layer.keys/values dictionary and no Feature.tags are written.
"""
from __future__ import annotations
from typing import Any, Dict, Iterable, Optional

from .config import TilingConfig, DEFAULT_EXTENT
from .geometry import encode_geometry
from .pbf import write_length_delimited, write_packed_varints, write_string, write_varint_field

TILE_LAYERS = 3
LAYER_NAME = 1
LAYER_FEATURES = 2
LAYER_EXTENT = 5
LAYER_VERSION = 15
FEATURE_TYPE = 3
FEATURE_GEOMETRY = 4

EMPTY_TILE = b""


def encode_feature(feature: Dict[str, Any]) -> bytes:
    """
    Encode `{"geometry": <shapely geometry in tile coords>, ...}` as a Feature
    framed as Layer field 2. Any "properties" entry is ignored.
    """
    geom_type, commands = encode_geometry(feature["geometry"])

    body = bytearray()
    write_varint_field(body, FEATURE_TYPE, int(geom_type))
    write_packed_varints(body, FEATURE_GEOMETRY, commands)

    framed = bytearray()
    write_length_delimited(framed, LAYER_FEATURES, body)
    return bytes(framed)


def encode_layer(
    features: Iterable[Dict[str, Any]],
    name: str,
    extent: int = DEFAULT_EXTENT,
    version: Optional[int] = None,
) -> bytes:
    body = bytearray()
    write_string(body, LAYER_NAME, name)
    write_varint_field(body, LAYER_EXTENT, extent)
    if version is not None:
        write_varint_field(body, LAYER_VERSION, version)
    for feature in features:
        body.extend(encode_feature(feature))

    framed = bytearray()
    write_length_delimited(framed, TILE_LAYERS, body)
    return bytes(framed)


class MVTEncoder:
    def __init__(self, config: TilingConfig):
        self.layer_name = config.layer_name
        self.extent = config.extent
        self.version = config.mvt_version

    def encode(self, features) -> bytes:
        features = list(features)
        if not features:
            return EMPTY_TILE
        return encode_layer(features, self.layer_name, self.extent, self.version)

    @staticmethod
    def empty_tile() -> bytes:
        return EMPTY_TILE
