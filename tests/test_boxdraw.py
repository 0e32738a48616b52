import pytest

from tgrid.boxdraw import (
    BBD,
    BDB,
    BOXDATA,
    BRL,
    BoxRect,
    boxdraw_index,
    draw_box,
    draw_box_lines,
    draw_boxes,
    is_boxdraw,
)
from tgrid.glyph import Attr

FG = (60000, 30000, 1000)
BG = (0, 0, 0)


def test_is_boxdraw_lines_and_unsupported_dashes():
    assert is_boxdraw(0x2500, True, False)
    assert not is_boxdraw(0x2504, True, False)
    assert not is_boxdraw(0x2500, False, False)
    assert not is_boxdraw(ord("a"), True, True)


def test_is_boxdraw_braille():
    assert is_boxdraw(0x2800, False, True)
    assert not is_boxdraw(0x2800, True, False)


def test_index_braille_and_bold():
    assert boxdraw_index(0x2841, Attr.NULL, True, False) == BRL | 0x41
    assert boxdraw_index(0x2500, Attr.BOLD, False, True) == BDB | BOXDATA[0]
    assert boxdraw_index(0x2500, Attr.BOLD, False, False) == BOXDATA[0]


def test_full_block_covers_cell():
    assert BOXDATA[0x88] == BBD
    rects = draw_box(3, 4, 8, 16, FG, BG, boxdraw_index(0x2588))
    assert rects == [BoxRect(3, 4, 8, 16, FG)]


def test_upper_and_lower_half_tile_cell():
    upper = draw_box(0, 0, 8, 15, FG, BG, boxdraw_index(0x2580))
    lower = draw_box(0, 0, 8, 15, FG, BG, boxdraw_index(0x2584))
    assert len(upper) == 1 and len(lower) == 1
    assert upper[0].y + upper[0].h == lower[0].y
    assert upper[0].h + lower[0].h == 15


def test_quadrant_area():
    rects = draw_box(0, 0, 9, 17, FG, BG, boxdraw_index(0x259B))
    assert len(rects) == 3
    full = draw_box(0, 0, 9, 17, FG, BG, boxdraw_index(0x2588))[0]
    assert sum(r.w * r.h for r in rects) < full.w * full.h


def test_braille_all_dots_cover_cell():
    bd = boxdraw_index(0x28FF, Attr.NULL, True)
    rects = draw_box(0, 0, 10, 20, FG, BG, bd)
    assert len(rects) == 8
    assert sum(r.w * r.h for r in rects) == 200


def test_shade_of_equal_colours_is_that_colour():
    rects = draw_box(0, 0, 8, 16, FG, FG, boxdraw_index(0x2592))
    assert rects == [BoxRect(0, 0, 8, 16, FG)]


def test_light_horizontal_spans_width():
    rects = draw_box_lines(0, 0, 10, 20, BOXDATA[0x00])
    assert len({r.y for r in rects}) == 1
    assert min(r.x for r in rects) == 0
    assert max(r.x + r.w for r in rects) == 10


def test_bold_lines_are_thicker():
    normal = draw_box_lines(0, 0, 10, 20, BOXDATA[0x00])
    bold = draw_box_lines(0, 0, 10, 20, BDB | BOXDATA[0x00])
    assert max(r.h for r in bold) > max(r.h for r in normal)


def test_lines_get_foreground_colour():
    rects = draw_box(0, 0, 10, 20, FG, BG, BOXDATA[0x3C])
    assert rects and all(r.color == FG for r in rects)


@pytest.mark.parametrize("u", [u for u in range(0x2500, 0x25A0) if is_boxdraw(u)])
def test_all_shapes_stay_inside_cell(u):
    rects = draw_box(5, 7, 10, 20, FG, BG, boxdraw_index(u))
    assert rects
    for r in rects:
        assert r.w >= 0 and r.h >= 0
        assert 5 <= r.x and r.x + r.w <= 15
        assert 7 <= r.y and r.y + r.h <= 27


def test_draw_boxes_advances_per_cell():
    bd = boxdraw_index(0x2588)
    rects = draw_boxes(2, 0, 8, 16, FG, BG, [bd, bd, bd])
    assert [r.x for r in rects] == [2, 10, 18]
    assert draw_boxes(0, 0, 8, 16, FG, BG, []) == []