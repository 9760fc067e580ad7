# icon_pipeline.py
"""
Export pipeline: source buffer -> resample -> optional rounded corners -> PNG.

Every call works on an explicit ExportRequest and its own chain of
buffers, so the GUI can run exports on a worker thread without sharing
state. Any stage failure raises and nothing is written.
"""
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from corner_masker import apply_rounded_corners, icon_corner_radius
from icon_errors import InvalidDimensions, NoSourceImage
from icon_settings import MAX_DIMENSION, PRESET_SIZES
from pixel_buffer import PixelBuffer
from png_encoder import encode, write_file
from resampler import resample


@dataclass(frozen=True)
class Size:
    width: float
    height: float

    def __post_init__(self):
        for name, value in (("width", self.width), ("height", self.height)):
            if not math.isfinite(value) or value <= 0:
                raise InvalidDimensions(f"Icon {name} must be a positive number, got {value!r}")
            if int(value) == 0:
                raise InvalidDimensions(f"Icon {name} {value!r} is smaller than one pixel")
            if int(value) > MAX_DIMENSION:
                raise InvalidDimensions(f"Icon {name} {int(value)} is larger than {MAX_DIMENSION}px")

    @property
    def pixel_width(self) -> int:
        return int(self.width)

    @property
    def pixel_height(self) -> int:
        return int(self.height)


def _parse_dimension(text, name):
    if isinstance(text, bool):
        raise InvalidDimensions(f"Icon {name} must be a number, got {text!r}")
    if isinstance(text, (int, float)):
        return float(text)
    try:
        return float(str(text).strip())
    except ValueError:
        raise InvalidDimensions(f"Icon {name} must be a number, got {text!r}") from None


def resolve_size(preset=None, custom_width=None, custom_height=None) -> Size:
    """
    Turn the size controls into a Size: either one of PRESET_SIZES, or a
    custom width/height typed by the user.
    """
    if preset is not None:
        if preset not in PRESET_SIZES:
            raise InvalidDimensions(f"Unsupported preset size {preset!r}; choose one of {PRESET_SIZES}")
        return Size(float(preset), float(preset))
    if custom_width is None or custom_height is None:
        raise InvalidDimensions("Custom size needs both a width and a height.")
    return Size(_parse_dimension(custom_width, "width"), _parse_dimension(custom_height, "height"))


def default_filename(preset=None, custom_width=None, custom_height=None) -> str:
    if preset is not None:
        return f"icon_{int(preset)}x{int(preset)}.png"
    return f"icon_{str(custom_width).strip()}x{str(custom_height).strip()}.png"


@dataclass(frozen=True)
class ExportRequest:
    source_image: Optional[PixelBuffer]
    target_size: Size
    round_corners: bool = False

    @classmethod
    def create(cls, source_image, preset=None, custom_width=None, custom_height=None,
               round_corners=False):
        size = resolve_size(preset, custom_width, custom_height)
        return cls(source_image, size, bool(round_corners))


def _report(progress, text):
    if progress is not None:
        progress(text)


def export_icon(request: ExportRequest, progress: Callable[[str], None] = None) -> bytes:
    if request.source_image is None:
        raise NoSourceImage()
    size = request.target_size
    if size is None:
        raise InvalidDimensions("No target size chosen.")

    w, h = size.pixel_width, size.pixel_height
    _report(progress, f"Resizing to {w}x{h}...")
    icon = resample(request.source_image, w, h)

    if request.round_corners:
        radius = icon_corner_radius(size.width)
        _report(progress, f"Rounding corners (radius {radius:.1f}px)...")
        icon = apply_rounded_corners(icon, radius)

    _report(progress, "Encoding PNG...")
    return encode(icon)


def export_to_file(request: ExportRequest, path, progress: Callable[[str], None] = None) -> Path:
    data = export_icon(request, progress)
    _report(progress, f"Writing {path}...")
    return write_file(path, data)
