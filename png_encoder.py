# png_encoder.py
"""
Lossless RGBA PNG output.

The encoder always writes 8-bit RGBA, non-interlaced. The compression
level only trades file size against speed; decoded pixels are the same
for every level.
"""
import io
import os
import tempfile
from pathlib import Path

from icon_errors import EncodeError, WriteError
from icon_settings import PNG_COMPRESSION
from pixel_buffer import PixelBuffer


def encode(buffer: PixelBuffer, compression: int = PNG_COMPRESSION) -> bytes:
    if isinstance(compression, bool) or not isinstance(compression, int) or not 0 <= compression <= 9:
        raise EncodeError(f"PNG compression level must be 0..9, got {compression!r}")
    try:
        img = buffer.to_image()
        out = io.BytesIO()
        img.save(out, format="PNG", compress_level=compression, optimize=False)
    except (OSError, ValueError, TypeError) as e:
        raise EncodeError(f"PNG encoding failed: {e}") from e
    return out.getvalue()


def write_file(path, data: bytes):
    """
    Write encoded bytes to path. The data goes to a temporary file next to
    the destination and is renamed into place, so a failed write never
    leaves a truncated icon behind.
    """
    path = Path(path)
    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=".icon-", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name and os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise WriteError(f"Cannot write {path}: {e}") from e
    return path
