import pytest

from tgrid.glyph import Attr
from tgrid.kbdselect import WRAP_NONE, KbdsMode, KCursor, KeyboardSelect
from tgrid.screen import Screen


def put(screen, row, text):
    for i, ch in enumerate(text):
        g = screen.lines[row][i]
        g.u = ord(ch)
        g.mode = Attr.SET


@pytest.fixture
def ks():
    screen = Screen(20, 3, history=5)
    put(screen, 0, "hello world")
    put(screen, 1, "foo bar")
    k = KeyboardSelect(screen)
    assert k.start() is True
    return k


def test_start_at_terminal_cursor(ks):
    assert (ks.c.x, ks.c.y) == (0, 0)
    assert ks.in_use
    assert not ks.is_select_mode()


def test_quantified_motion(ks):
    ks.handle_key("3")
    assert ks.quant == 3
    ks.handle_key("l")
    assert ks.c.x == 3
    assert ks.quant == 0
    ks.handle_key("j")
    assert ks.c.y == 1


def test_select_and_yank(ks):
    ks.handle_key("v")
    assert ks.is_select_mode()
    ks.handle_key("l")
    ks.handle_key("l")
    ks.handle_key("y")
    assert ks.clipboard == "hel"
    assert not ks.is_select_mode()


def test_search_moves_and_highlights(ks):
    ks.handle_key("slash")
    assert ks.is_search_mode()
    ks.handle_key("w", "w")
    ks.handle_key("o", "o")
    ks.handle_key("Return")
    assert not ks.is_search_mode()
    assert ks.c.x == 6
    assert ks.screen.lines[0][6].mode & Attr.HIGHLIGHT


def test_paste_into_search_split_utf8(ks):
    data = "é".encode()
    ks.paste_into_search(data[:1])
    ks.paste_into_search(data[1:], append=True)
    assert [g.u for g in ks.search] == [ord("é")]


def test_find_and_till(ks):
    ks.handle_key("f")
    assert ks.mode & KbdsMode.FIND
    ks.handle_key("o", "o")
    assert ks.c.x == 4
    ks.move_to(0, 0)
    ks.handle_key("t")
    ks.handle_key("o", "o")
    assert ks.c.x == 3


def test_next_word(ks):
    ks.handle_key("w")
    assert ks.c.x == 6
    ks.handle_key("b")
    assert ks.c.x == 0


def test_move_forward_edges(ks):
    c = KCursor(0, 0)
    c.line = ks.screen.tline(0)
    c.len = ks.screen.line_len(c.line)
    assert ks.move_forward(c, -1, WRAP_NONE) is None
    moved = ks.move_forward(c, 1, WRAP_NONE)
    assert moved.x == 1 and c.x == 0


def test_status_bar_mode_label(ks):
    cells = ks.status_bar(0)
    text = "".join(g.char for _, g in sorted(cells, key=lambda t: t[0]))
    assert text == " MOVE "
    assert max(col for col, _ in cells) == ks.screen.cols - 1


def test_escape_leaves(ks):
    assert ks.handle_key("Escape") is True
    assert not ks.in_use
    assert ks.status_bar(0) == []


def test_dollar_moves_to_line_end(ks):
    ks.handle_key("dollar")
    assert ks.c.x == len("hello world") - 1