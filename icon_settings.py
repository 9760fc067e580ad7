# icon_settings.py
import math
import os

PRESET_SIZES = (16, 32, 64, 128, 256, 512, 1024)
SOURCE_FILTER = "Images (*.png *.jpg *.jpeg)"
# OpenCV remap needs every side below SHRT_MAX (32767)
MAX_DIMENSION = 32766


def env_setting(name, default, cast, valid):
    """Read an override from the environment, keeping the default when it is unusable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        value = None
    if value is None or not valid(value):
        print(f"WARNING: ignoring {name}={raw!r}, using {default}")
        return default
    return value


# ------------------ USER TUNABLE ------------------
# Radius of the rounded corners as a fraction of the icon width
# (the macOS app icon grid uses 17.54%).
CORNER_RATIO = env_setting("ICONEDITOR_CORNER_RATIO", 0.1754, float,
                           lambda v: math.isfinite(v) and v >= 0)
# zlib level for PNG output: 0 = fastest/largest, 9 = smallest. Pixels are identical either way.
PNG_COMPRESSION = env_setting("ICONEDITOR_PNG_COMPRESSION", 9, int, lambda v: 0 <= v <= 9)
# Size selected when the window opens
DEFAULT_SIZE = env_setting("ICONEDITOR_DEFAULT_SIZE", 512, int, lambda v: v in PRESET_SIZES)
# Downscales beyond this factor get an area-averaging pass before bicubic
AREA_PREFILTER_FACTOR = 2.0
# --------------------------------------------------
