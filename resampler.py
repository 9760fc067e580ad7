# resampler.py
"""
Bicubic scaling of a PixelBuffer to an arbitrary width/height.

Width and height scale independently (no aspect-ratio lock). The four
channels are interpolated separately in straight alpha. Each output pixel
centre is mapped back into source space and sampled with OpenCV's cubic
kernel; samples past the border replicate the edge pixels.
"""
import math
import numbers

import cv2
import numpy as np

from icon_errors import InvalidSize
from icon_settings import AREA_PREFILTER_FACTOR, MAX_DIMENSION
from pixel_buffer import PixelBuffer


def _check_target(target_width, target_height):
    dims = []
    for name, value in (("width", target_width), ("height", target_height)):
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidSize(f"Target {name} must be a number, got {value!r}")
        if not math.isfinite(value) or value <= 0 or value != int(value):
            raise InvalidSize(f"Target {name} must be a positive integer, got {value!r}")
        if value > MAX_DIMENSION:
            raise InvalidSize(f"Target {name} {int(value)} exceeds the {MAX_DIMENSION}px limit")
        dims.append(int(value))
    return tuple(dims)


def _prefilter_length(src_len, dst_len):
    limit = min(int(round(dst_len * AREA_PREFILTER_FACTOR)), MAX_DIMENSION)
    return src_len if src_len <= limit else limit


def _area_prefilter(src, tw, th):
    """
    Shrink with area averaging until each axis is at most
    AREA_PREFILTER_FACTOR times its target. A plain 4x4 cubic kernel
    skips source pixels on big reductions; averaging first widens the
    footprint in proportion to the scale factor. Sides longer than
    MAX_DIMENSION are always brought down to it so remap can take them.
    """
    h, w = src.shape[:2]
    iw = _prefilter_length(w, tw)
    ih = _prefilter_length(h, th)
    if (iw, ih) == (w, h):
        return src
    return cv2.resize(src, (iw, ih), interpolation=cv2.INTER_AREA)


def _source_coords(dst_len, src_len):
    # centre of output pixel i lands at (i + 0.5) * scale - 0.5 in the source
    scale = src_len / dst_len
    return (np.arange(dst_len, dtype=np.float32) + 0.5) * np.float32(scale) - 0.5


def resample(source: PixelBuffer, target_width: int, target_height: int) -> PixelBuffer:
    tw, th = _check_target(target_width, target_height)
    if (tw, th) == source.size:
        return source.copy()

    src = _area_prefilter(source.pixels.astype(np.float32), tw, th)
    h, w = src.shape[:2]

    map_x, map_y = np.meshgrid(_source_coords(tw, w), _source_coords(th, h))
    out = cv2.remap(src, map_x, map_y,
                    interpolation=cv2.INTER_CUBIC, borderMode=cv2.BORDER_REPLICATE)

    # cubic overshoots near hard edges
    out = np.clip(np.rint(out), 0, 255).astype(np.uint8)
    return PixelBuffer(tw, th, out.reshape(th, tw, 4))
