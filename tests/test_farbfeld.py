import io
import struct

import pytest

from tgrid.farbfeld import MAGIC, FarbfeldError, load_farbfeld, read_farbfeld


def _image_bytes(width, height, pixels):
    body = b"".join(struct.pack(">HHHH", *p) for p in pixels)
    return MAGIC + struct.pack(">II", width, height) + body


PIXELS = [(0x1234, 0x5678, 0x9ABC, 0xDEF0), (0xFFFF, 0, 0, 0xFFFF)]


def test_read_dimensions_and_pixels():
    img = read_farbfeld(io.BytesIO(_image_bytes(2, 1, PIXELS)))
    assert (img.width, img.height) == (2, 1)
    assert img.pixels == PIXELS


def test_xrgb_packs_high_bytes():
    img = read_farbfeld(io.BytesIO(_image_bytes(2, 1, PIXELS)))
    assert img.to_xrgb64() == [0xDE12569A, 0xFFFF0000]


def test_icon_layout_matches_background_pixels():
    img = read_farbfeld(io.BytesIO(_image_bytes(1, 2, PIXELS)))
    icon = img.to_net_wm_icon()
    assert icon[:2] == [1, 2]
    assert icon[2:] == img.to_xrgb64()
    assert len(icon) == 2 + 2


def test_bad_magic():
    data = b"notfarbf" + struct.pack(">II", 0, 0)
    with pytest.raises(FarbfeldError, match="magic"):
        read_farbfeld(io.BytesIO(data))


def test_short_header():
    with pytest.raises(FarbfeldError, match="header"):
        read_farbfeld(io.BytesIO(MAGIC + b"\0\0"))


def test_short_data():
    data = _image_bytes(2, 2, PIXELS)
    with pytest.raises(FarbfeldError, match="data"):
        read_farbfeld(io.BytesIO(data))


def test_empty_image():
    img = read_farbfeld(io.BytesIO(_image_bytes(0, 0, [])))
    assert img.to_net_wm_icon() == [0, 0]


def test_load_from_file(tmp_path):
    path = tmp_path / "bg.ff"
    path.write_bytes(_image_bytes(2, 1, PIXELS))
    assert load_farbfeld(path).pixels == PIXELS


def test_load_missing_file(tmp_path):
    with pytest.raises(FarbfeldError):
        load_farbfeld(tmp_path / "missing.ff")