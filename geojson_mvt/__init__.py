from .config import TilingConfig
from .errors import EncodingOverflow, InvalidCoordinate, InvalidInput, InvalidZoomRange, TilingError, UnsupportedGeometry
from .features import BBox, PointFeature
from .generator import PointTileGenerator
from .mvt_encoder import EMPTY_TILE, MVTEncoder, encode_feature, encode_layer
from .tile_range import TileRange, tile_range
from .tiler import TileBuilder, build_tile
from .writer import TileWriter

__all__ = [
    "TilingConfig",
    "TilingError",
    "InvalidCoordinate",
    "InvalidZoomRange",
    "InvalidInput",
    "EncodingOverflow",
    "UnsupportedGeometry",
    "BBox",
    "PointFeature",
    "PointTileGenerator",
    "EMPTY_TILE",
    "MVTEncoder",
    "encode_feature",
    "encode_layer",
    "TileRange",
    "tile_range",
    "TileBuilder",
    "build_tile",
    "TileWriter",
]
