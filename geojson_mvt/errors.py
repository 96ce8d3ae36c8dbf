class TilingError(Exception):
    """Base class for every error raised while building tiles."""


class InvalidCoordinate(TilingError, ValueError):
    """Longitude/latitude that cannot be projected (NaN, inf, |lat| >= 90)."""


class InvalidZoomRange(TilingError, ValueError):
    pass


class EncodingOverflow(TilingError, OverflowError):
    """Integer outside the range the wire encoder supports."""


class UnsupportedGeometry(TilingError, TypeError):
    pass


class InvalidInput(TilingError, ValueError):
    """Input file that cannot be parsed as GeoJSON."""
