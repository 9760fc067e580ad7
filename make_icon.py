# make_icon.py
"""
Command-line icon export.

Usage:
    python make_icon.py logo.png                      -> icon_512x512.png
    python make_icon.py logo.png --size 256 --round   -> icon_256x256.png
    python make_icon.py logo.jpg out.png --custom 300 200

Exit code is 0 on success and 1 on any error, so scripts can check it.
"""
import argparse
import sys
from pathlib import Path

from icon_errors import IconError
from icon_pipeline import ExportRequest, default_filename, export_to_file
from icon_settings import DEFAULT_SIZE, PRESET_SIZES
from pixel_buffer import load


def build_parser():
    parser = argparse.ArgumentParser(description="Resize an image into a PNG icon, optionally with rounded corners.")
    parser.add_argument("src", help="Source image (PNG/JPEG)")
    parser.add_argument("dst", nargs="?", help="Output PNG path (default: icon_<w>x<h>.png next to the source)")
    size = parser.add_mutually_exclusive_group()
    size.add_argument("--size", type=int, choices=PRESET_SIZES, help=f"Square preset size (default {DEFAULT_SIZE})")
    size.add_argument("--custom", nargs=2, metavar=("WIDTH", "HEIGHT"), help="Custom width and height in pixels")
    parser.add_argument("--round", action="store_true", help="Round the corners (radius 17.54%% of the width)")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.custom:
        size_kwargs = {"custom_width": args.custom[0], "custom_height": args.custom[1]}
    else:
        size_kwargs = {"preset": args.size or DEFAULT_SIZE}

    src = Path(args.src)
    try:
        # validate the size before touching the source file
        ExportRequest.create(None, **size_kwargs)
        dst = Path(args.dst) if args.dst else src.with_name(default_filename(**size_kwargs))

        print(f"Loading {src}")
        source = load(src)
        print(f"Source: {source.width}x{source.height}")

        request = ExportRequest.create(source, round_corners=args.round, **size_kwargs)
        export_to_file(request, dst, progress=print)
    except IconError as e:
        print("ERROR:", str(e))
        return 1

    print("Saved icon at:", dst)
    return 0


if __name__ == "__main__":
    sys.exit(main())
