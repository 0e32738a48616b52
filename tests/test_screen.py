from tgrid.glyph import Attr, Glyph
from tgrid.screen import SEL_READY, SEL_REGULAR, ScrollMode, Screen, SnapMode


def put(screen, y, text, extra=Attr.NULL):
    line = screen.lines[y]
    for x, ch in enumerate(text):
        line[x] = Glyph(ord(ch), Attr.SET | extra)


def text(line, n=None):
    return "".join(chr(g.u) for g in line[:n])


def test_line_len_and_get_line():
    s = Screen(10, 3, history=10)
    put(s, 0, "hello")
    assert s.line_len(s.lines[0]) == 5
    assert s.get_line(0) == "hello\n"


def test_scroll_up_saves_history_and_kscroll():
    s = Screen(10, 3, history=10)
    put(s, 0, "abc")
    s.scroll_up(0, 2, 1, ScrollMode.SAVEHIST)
    assert s.histf == 1
    assert text(s.tline_abs(-1), 3) == "abc"
    assert s.line_len(s.lines[0]) == 0
    s.kscroll_up(5)
    assert s.scr == 1
    assert text(s.tline(0), 3) == "abc"
    s.kscroll_down(1)
    assert s.scr == 0


def test_delete_and_insert():
    s = Screen(10, 2, history=4)
    put(s, 0, "abcdef")
    s.cursor.x = 1
    s.delete_char(2)
    assert text(s.lines[0], 4) == "adef"
    s2 = Screen(10, 2, history=4)
    put(s2, 0, "abcdef")
    s2.cursor.x = 1
    s2.insert_blank(2)
    assert text(s2.lines[0], 8) == "a  bcdef"


def test_reflow_round_trip():
    s = Screen(10, 3, history=10)
    put(s, 0, "abcdefgh")
    s.cursor.x, s.cursor.y = 0, 2
    s.resize(4, 3)
    assert s.cols == 4
    assert text(s.tline_abs(-1)) == "abcd"
    assert s.tline_abs(-1)[3].mode & Attr.WRAP
    assert text(s.lines[0]) == "efgh"
    s.resize(10, 3)
    assert s.histf == 0
    assert text(s.lines[0], 8) == "abcdefgh"
    assert not any(g.mode & Attr.WRAP for g in s.lines[0])


def test_taller_resize_pulls_history():
    s = Screen(10, 3, history=10)
    put(s, 0, "abc")
    s.scroll_up(0, 2, 1, ScrollMode.SAVEHIST)
    s.resize(10, 5)
    assert s.rows == 5
    assert s.histf == 0
    assert text(s.lines[0], 3) == "abc"


def test_selection_text_and_membership():
    s = Screen(10, 3, history=4)
    put(s, 0, "hello")
    put(s, 1, "world")
    sel = s.sel
    sel.ob.x, sel.ob.y = 1, 0
    sel.oe.x, sel.oe.y = 3, 1
    sel.type = SEL_REGULAR
    sel.mode = SEL_READY
    sel.normalize()
    assert s.get_selection() == "ello\nworl"
    assert not s.selected(0, 0)
    assert s.selected(2, 1)
    sel.clear()
    assert s.get_selection() is None


def test_selection_move():
    s = Screen(10, 3, history=4)
    s.sel.ob.y = s.sel.oe.y = 1
    s.sel.normalize()
    s.sel.move(2)
    assert (s.sel.nb.y, s.sel.ne.y) == (3, 3)


def test_sel_snap_word():
    s = Screen(10, 2, history=4)
    put(s, 0, "foo bar")
    s.sel.snap = SnapMode.WORD
    assert s.sel_snap(5, 0, -1) == (4, 0)
    assert s.sel_snap(4, 0, 1) == (6, 0)


def test_alt_screen_switch():
    s = Screen(10, 3, history=4)
    put(s, 0, "main")
    s.cursor.x = 3
    s.load_alt_screen(True, True)
    assert s.alt
    assert s.line_len(s.lines[0]) == 0
    s.cursor.x = 7
    s.load_def_screen(True, True)
    assert not s.alt
    assert s.cursor.x == 3
    assert text(s.lines[0], 4) == "main"


def test_scroll_to_prompt():
    s = Screen(10, 3, history=10)
    put(s, 0, "p", Attr.FTCS_PROMPT)
    s.scroll_up(0, 2, 2, ScrollMode.SAVEHIST)
    s.scroll_to_prompt(-1)
    assert s.scr == 2
    assert s.tline(0)[0].mode & Attr.FTCS_PROMPT