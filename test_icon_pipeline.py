import dataclasses
import os

import numpy as np
import pytest
from PIL import Image

import make_icon
from icon_errors import InvalidDimensions, NoSourceImage, WriteError
from icon_pipeline import (ExportRequest, Size, default_filename, export_icon,
                           export_to_file, resolve_size)
from pixel_buffer import PixelBuffer, decode

RED = (255, 0, 0, 255)


@pytest.fixture
def red_source():
    return PixelBuffer.filled(1000, 1000, RED)


@pytest.fixture
def red_png(tmp_path):
    path = tmp_path / "logo.png"
    Image.new("RGBA", (200, 200), RED).save(path)
    return path


# -------------------------
# size resolution
# -------------------------
@pytest.mark.parametrize("preset", [16, 32, 64, 128, 256, 512, 1024])
def test_presets(preset):
    size = resolve_size(preset=preset)
    assert (size.pixel_width, size.pixel_height) == (preset, preset)


@pytest.mark.parametrize("preset", [0, 48, 100, 2048, -16])
def test_unknown_preset(preset):
    with pytest.raises(InvalidDimensions):
        resolve_size(preset=preset)


def test_custom_size_text():
    size = resolve_size(custom_width=" 300 ", custom_height="200.9")
    assert (size.width, size.height) == (300.0, 200.9)
    assert (size.pixel_width, size.pixel_height) == (300, 200)


@pytest.mark.parametrize("w,h", [("abc", "10"), ("10", "abc"), ("", "10"), ("0", "10"),
                                 ("-5", "10"), ("nan", "10"), ("inf", "10"), ("0.5", "10"),
                                 (None, "10")])
def test_invalid_custom_size(w, h):
    with pytest.raises(InvalidDimensions):
        resolve_size(custom_width=w, custom_height=h)


def test_custom_size_above_pixel_limit():
    with pytest.raises(InvalidDimensions):
        resolve_size(custom_width="40000", custom_height="2")
    with pytest.raises(InvalidDimensions):
        Size(2.0, 32767.0)
    assert resolve_size(custom_width="32766", custom_height="2").pixel_width == 32766


def test_invalid_dimensions_is_a_value_error():
    with pytest.raises(ValueError):
        Size(-1.0, 4.0)


def test_default_filename():
    assert default_filename(preset=256) == "icon_256x256.png"
    assert default_filename(custom_width="300", custom_height=" 200 ") == "icon_300x200.png"
    assert default_filename(custom_width="12.5", custom_height="8") == "icon_12.5x8.png"


def test_request_is_immutable(red_source):
    request = ExportRequest.create(red_source, preset=16)
    with pytest.raises(dataclasses.FrozenInstanceError):
        request.round_corners = True


# -------------------------
# export
# -------------------------
def test_export_without_source():
    with pytest.raises(NoSourceImage):
        export_icon(ExportRequest(None, Size(16, 16)))


def test_export_square_icon(red_source):
    data = export_icon(ExportRequest.create(red_source, preset=512))
    icon = decode(data)
    assert icon.size == (512, 512)
    assert (icon.pixels == np.array(RED, dtype=np.uint8)).all()


def test_export_rounded_icon(red_source):
    icon = decode(export_icon(ExportRequest.create(red_source, preset=256, round_corners=True)))
    alpha = icon.pixels[..., 3]
    assert icon.size == (256, 256)
    assert icon.get_pixel(128, 128) == RED
    assert icon.get_pixel(128, 0) == RED
    for x, y in [(0, 0), (255, 0), (0, 255), (255, 255), (5, 5)]:
        assert alpha[y, x] == 0

    # corner arc centre sits 44.9px in from each edge
    r = 0.1754 * 256
    ys, xs = np.indices((256, 256)) + 0.5
    dist = np.hypot(xs - r, ys - r)
    corner = (xs < r) & (ys < r)
    assert (alpha[corner & (dist > r + 0.5)] == 0).all()
    assert (alpha[corner & (dist < r - 0.5)] == 255).all()
    band = alpha[corner & (np.abs(dist - r) < 0.5)]
    assert ((band > 0) & (band < 255)).any()


def test_export_custom_size_stretches(red_source):
    request = ExportRequest.create(red_source, custom_width="300", custom_height="120")
    assert decode(export_icon(request)).size == (300, 120)


def test_custom_rounding_uses_width(red_source):
    # 0.1754 * 40 = 7.0 but the height caps the radius at 5
    request = ExportRequest.create(red_source, custom_width="40", custom_height="10", round_corners=True)
    icon = decode(export_icon(request))
    assert icon.get_pixel(20, 5)[3] == 255
    assert icon.get_pixel(0, 0)[3] == 0


def test_source_is_untouched(red_source):
    export_icon(ExportRequest.create(red_source, preset=16, round_corners=True))
    assert (red_source.pixels == np.array(RED, dtype=np.uint8)).all()


def test_progress_reports_each_stage(red_source):
    seen = []
    export_icon(ExportRequest.create(red_source, preset=32, round_corners=True), progress=seen.append)
    assert [s.split()[0] for s in seen] == ["Resizing", "Rounding", "Encoding"]


def test_export_to_file(tmp_path, red_source):
    target = tmp_path / "out.png"
    export_to_file(ExportRequest.create(red_source, preset=64), target)
    with Image.open(target) as img:
        assert img.size == (64, 64)
        assert img.mode == "RGBA"


def test_export_to_unwritable_path(tmp_path, red_source):
    target = tmp_path / "missing" / "out.png"
    with pytest.raises(WriteError):
        export_to_file(ExportRequest.create(red_source, preset=16), target)
    assert not target.exists()


# -------------------------
# command line
# -------------------------
def test_cli_preset(red_png, tmp_path, capsys):
    out = tmp_path / "icon.png"
    assert make_icon.main([str(red_png), str(out), "--size", "32", "--round"]) == 0
    with Image.open(out) as img:
        assert img.size == (32, 32)
        assert img.getpixel((0, 0))[3] == 0
    assert "Saved icon at:" in capsys.readouterr().out


def test_cli_default_name(red_png, tmp_path):
    assert make_icon.main([str(red_png), "--custom", "30", "20"]) == 0
    assert (tmp_path / "icon_30x20.png").exists()


def test_cli_bad_custom_size_writes_nothing(red_png, tmp_path, capsys):
    out = tmp_path / "icon.png"
    assert make_icon.main([str(red_png), str(out), "--custom", "abc", "10"]) == 1
    assert not out.exists()
    assert "ERROR:" in capsys.readouterr().out


def test_cli_unreadable_source(tmp_path):
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"definitely not a png")
    assert make_icon.main([str(bad), str(tmp_path / "out.png")]) == 1
    assert sorted(os.listdir(tmp_path)) == ["bad.png"]


def test_cli_oversized_custom_size(red_png, tmp_path, capsys):
    out = tmp_path / "icon.png"
    assert make_icon.main([str(red_png), str(out), "--custom", "40000", "2"]) == 1
    assert not out.exists()
    assert "ERROR:" in capsys.readouterr().out
