from enum import IntEnum
from typing import List, Tuple

from shapely.geometry import LineString, Point, Polygon
from shapely.geometry.base import BaseGeometry

from .errors import UnsupportedGeometry
from .pbf import zigzag

CMD_MOVE_TO = 1


class GeomType(IntEnum):
    UNKNOWN = 0
    POINT = 1
    LINESTRING = 2
    POLYGON = 3


def command_integer(command_id: int, count: int) -> int:
    return (command_id & 0x7) | (count << 3)


def encode_point_geometry(x: int, y: int) -> List[int]:
    # a lone MoveTo: the cursor starts at (0, 0) so the vertex is its own delta
    return [command_integer(CMD_MOVE_TO, 1), zigzag(x), zigzag(y)]


def encode_geometry(geom: BaseGeometry) -> Tuple[GeomType, List[int]]:
    """
    Encode a geometry already expressed in integer tile coordinates.

    Returns the MVT geometry type together with its command stream.
    """
    if isinstance(geom, Point):
        if geom.is_empty:
            raise UnsupportedGeometry("empty point")
        return GeomType.POINT, encode_point_geometry(int(geom.x), int(geom.y))

    # TODO: LineTo/ClosePath streams for lines and polygons need delta chaining and winding order
    if isinstance(geom, (LineString, Polygon)):
        raise UnsupportedGeometry(f"{geom.geom_type} encoding is not implemented")

    raise UnsupportedGeometry(f"cannot encode {type(geom).__name__}")
