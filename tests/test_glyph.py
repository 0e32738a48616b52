from tgrid.glyph import DEFAULT_BG, DEFAULT_FG, Attr, Glyph, blank_line


def test_blank_line_cells_are_cleared():
    line = blank_line(5, 3, 4)
    assert len(line) == 5
    assert all(g.u == ord(" ") and g.mode == Attr.NULL for g in line)
    assert all(g.fg == 3 and g.bg == 4 for g in line)


def test_blank_line_default_colours():
    line = blank_line(2)
    assert [(g.fg, g.bg) for g in line] == [(DEFAULT_FG, DEFAULT_BG)] * 2


def test_blank_line_cells_are_distinct_objects():
    line = blank_line(3)
    line[0].u = ord("x")
    assert line[1].u == ord(" ")


def test_copy_is_independent():
    g = Glyph(ord("a"), Attr.BOLD | Attr.WRAP, 1, 2)
    c = g.copy()
    assert c == g
    c.mode |= Attr.WIDE
    assert not g.mode & Attr.WIDE


def test_attr_flags_combine_on_glyph():
    g = Glyph(ord("a"), Attr.WRAP | Attr.SET, 1, 2)
    c = g.copy()
    assert c.mode & Attr.WRAP
    assert not c.mode & Attr.WDUMMY
    c.mode &= ~Attr.WRAP
    assert c.mode == Attr.SET
    assert g.mode == Attr.WRAP | Attr.SET


def test_char_property():
    assert Glyph(ord("Z")).char == "Z"