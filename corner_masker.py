# corner_masker.py
"""
Rounded-rectangle alpha mask with anti-aliased edges.

The mask is built from the signed distance of every pixel centre to a
rectangle covering the whole buffer whose corners are quarter circles of
the given radius. Coverage falls from 1 to 0 across a one pixel band
centred on the boundary, which gives smooth arcs instead of the stair
steps of a binary mask.
"""
import math

import numpy as np

from icon_errors import InvalidRadius
from icon_settings import CORNER_RATIO
from pixel_buffer import PixelBuffer


def icon_corner_radius(width):
    return CORNER_RATIO * float(width)


def clamp_radius(radius, width, height):
    if radius is None or math.isnan(radius) or radius < 0:
        raise InvalidRadius(f"Corner radius must be >= 0, got {radius!r}")
    return min(float(radius), min(width, height) / 2.0)


def rounded_rect_coverage(width: int, height: int, radius: float) -> np.ndarray:
    """Per-pixel coverage (float32, 0..1, shape (height, width)) of the rounded rectangle."""
    r = clamp_radius(radius, width, height)
    hw, hh = width / 2.0, height / 2.0

    xs = np.arange(width, dtype=np.float64) + 0.5
    ys = np.arange(height, dtype=np.float64) + 0.5
    qx = np.abs(xs - hw) - (hw - r)
    qy = np.abs(ys - hh) - (hh - r)
    qx, qy = np.meshgrid(qx, qy)

    # signed distance: negative inside, positive outside
    outside = np.hypot(np.maximum(qx, 0.0), np.maximum(qy, 0.0))
    inside = np.minimum(np.maximum(qx, qy), 0.0)
    dist = outside + inside - r

    return np.clip(0.5 - dist, 0.0, 1.0).astype(np.float32)


def apply_rounded_corners(source: PixelBuffer, radius: float) -> PixelBuffer:
    r = clamp_radius(radius, source.width, source.height)
    if r == 0:
        return source.copy()

    coverage = rounded_rect_coverage(source.width, source.height, r)
    out = source.pixels.copy()
    alpha = out[..., 3].astype(np.float32) * coverage
    out[..., 3] = np.rint(alpha).astype(np.uint8)
    # fully clipped pixels end up transparent black
    out[coverage == 0.0] = 0
    return PixelBuffer(source.width, source.height, out)
