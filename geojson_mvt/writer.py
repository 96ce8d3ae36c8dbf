import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class TileWriter:
    """Writes tile payloads to `<outdir>/<z>/<x>/<y>.<extension>`."""

    def __init__(self, outdir, extension="pbf"):
        logger.info(f"Initializing TileWriter with outdir={outdir}, extension={extension}")
        self.outdir = Path(outdir)
        self.extension = extension.lstrip(".")
        self.written = 0

    def tile_path(self, z, x, y):
        return self.outdir / str(z) / str(x) / f"{y}.{self.extension}"

    def write(self, z, x, y, data: bytes):
        if not data:
            raise ValueError(f"refusing to write empty tile {z}/{x}/{y}")
        path = self.tile_path(z, x, y)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
        self.written += 1
        logger.debug(f"Wrote tile z={z} x={x} y={y} ({len(data)} bytes)")
        return path
