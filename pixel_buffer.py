# pixel_buffer.py
"""
RGBA8 raster shared by every stage of the icon pipeline.

Pixels live in a (height, width, 4) uint8 numpy array, straight
(non-premultiplied) alpha, RGBA channel order. A buffer owns its array:
the constructor copies what it is given and transforms hand back new
buffers instead of writing into their input.
"""
import io
from pathlib import Path

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from icon_errors import DecodeError, IndexOutOfRange


class PixelBuffer:

    def __init__(self, width: int, height: int, pixels=None):
        width, height = int(width), int(height)
        if width <= 0 or height <= 0:
            raise ValueError(f"Buffer dimensions must be positive, got {width}x{height}")
        if pixels is None:
            pixels = np.zeros((height, width, 4), dtype=np.uint8)
        else:
            pixels = np.array(pixels, dtype=np.uint8, copy=True)
            if pixels.shape != (height, width, 4):
                raise ValueError(
                    f"Pixel array shape {pixels.shape} does not match {width}x{height} RGBA")
        self.width = width
        self.height = height
        self.pixels = np.ascontiguousarray(pixels)

    @classmethod
    def from_array(cls, array):
        """Build a buffer from a (h, w), (h, w, 3) or (h, w, 4) uint8 array."""
        array = np.asarray(array)
        if array.dtype != np.uint8:
            raise ValueError(f"Expected uint8 pixels, got {array.dtype}")
        if array.ndim == 2:
            array = np.dstack([array, array, array, np.full_like(array, 255)])
        elif array.ndim == 3 and array.shape[2] == 3:
            alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
            array = np.concatenate([array, alpha], axis=2)
        elif not (array.ndim == 3 and array.shape[2] == 4):
            raise ValueError(f"Unsupported pixel array shape {array.shape}")
        h, w = array.shape[:2]
        return cls(w, h, array)

    @classmethod
    def filled(cls, width, height, rgba):
        buf = cls(width, height)
        buf.pixels[...] = np.asarray(rgba, dtype=np.uint8)
        return buf

    @property
    def size(self):
        return self.width, self.height

    def copy(self):
        return PixelBuffer(self.width, self.height, self.pixels)

    def _check_bounds(self, x, y):
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexOutOfRange(
                f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer")

    def get_pixel(self, x: int, y: int):
        self._check_bounds(x, y)
        r, g, b, a = self.pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def set_pixel(self, x: int, y: int, rgba):
        self._check_bounds(x, y)
        if len(rgba) != 4 or any(not 0 <= int(c) <= 255 for c in rgba):
            raise ValueError(f"Expected four 0..255 channel values, got {rgba!r}")
        self.pixels[y, x] = rgba

    def to_image(self):
        """Pillow view of the buffer, used by the encoder and the GUI preview."""
        return Image.fromarray(self.pixels)

    def __eq__(self, other):
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.size == other.size and np.array_equal(self.pixels, other.pixels)

    __hash__ = None

    def __repr__(self):
        return f"PixelBuffer({self.width}x{self.height})"


# -------------------------
# Decoding
# -------------------------
def _rgba_array(img):
    # 16/32-bit grayscale: Pillow's own convert() clips instead of scaling
    if img.mode.startswith("I"):
        gray = np.asarray(img).astype(np.int64)
        if gray.size and gray.max() > 255:
            gray = gray >> 8
        gray = np.clip(gray, 0, 255).astype(np.uint8)
        return PixelBuffer.from_array(gray).pixels
    if img.mode != "RGBA":
        img = img.convert("RGBA")
    return np.asarray(img, dtype=np.uint8)


def decode(data: bytes) -> PixelBuffer:
    """Decode PNG/JPEG (or any Pillow-readable) bytes into an RGBA8 buffer.

    Multi-frame files contribute their first frame only. EXIF orientation
    is applied so photos come out upright.
    """
    if not data:
        raise DecodeError("Image data is empty.")
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            img = ImageOps.exif_transpose(img)
            array = _rgba_array(img)
    except UnidentifiedImageError as e:
        raise DecodeError("Unrecognized image format.") from e
    except (OSError, ValueError, SyntaxError) as e:
        raise DecodeError(f"Corrupt image data: {e}") from e
    h, w = array.shape[:2]
    return PixelBuffer(w, h, array)


def load(path) -> PixelBuffer:
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise DecodeError(f"Cannot read image file {path}: {e}") from e
    return decode(data)
