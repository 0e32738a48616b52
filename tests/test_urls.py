from unittest.mock import patch

from tgrid.glyph import Attr
from tgrid.screen import Screen
from tgrid.urls import copy_url, detect_url, is_url_char, open_url_on_click


def put(screen, row, text, col=0):
    for i, ch in enumerate(text):
        g = screen.lines[row][col + i]
        g.u = ord(ch)
        g.mode = Attr.SET


def test_is_url_char():
    assert is_url_char(ord("a"))
    assert is_url_char(ord("%"))
    assert not is_url_char(ord(" "))
    assert not is_url_char(ord("("))
    assert not is_url_char(0x2500)


def test_copy_url_on_bottom_row():
    screen = Screen(40, 5, history=10)
    text = "see http://example.com/x ok"
    put(screen, 4, text)
    assert copy_url(screen) == "http://example.com/x"
    assert screen.sel.ob.x == text.index("http")
    assert screen.sel.ob.y == 4


def test_copy_url_prefers_plain_http_on_a_line():
    screen = Screen(60, 5, history=10)
    text = "https://a.example.com http://b.example.com"
    put(screen, 4, text)
    assert copy_url(screen) == "http://b.example.com"


def test_copy_url_scans_upward():
    screen = Screen(40, 5, history=10)
    put(screen, 1, "http://example.com")
    assert copy_url(screen) == "http://example.com"
    assert screen.sel.ob.y == 1


def test_copy_url_without_url():
    screen = Screen(40, 5, history=10)
    put(screen, 2, "nothing to see")
    assert copy_url(screen) is None
    assert not screen.sel.active


def test_detect_url_strips_trailing_punctuation():
    screen = Screen(40, 5, history=10)
    text = "go to https://example.com/path, now"
    put(screen, 2, text)
    match = detect_url(screen, text.index("example"), 2)
    assert match.url == "https://example.com/path"
    assert match.x1 == text.index("https")
    assert match.x2 == text.index(",") - 1
    assert match.y1 == match.y2 == 2


def test_detect_url_rejects_non_urls():
    screen = Screen(40, 5, history=10)
    put(screen, 0, "foo.bar baz")
    assert detect_url(screen, 2, 0) is None
    assert detect_url(screen, 7, 0) is None


def test_detect_url_follows_wrapped_lines():
    screen = Screen(20, 3, history=10)
    first = "abc http://example.c"
    put(screen, 0, first)
    screen.lines[0][19].mode |= Attr.WRAP
    put(screen, 1, "om/z rest")
    match = detect_url(screen, 2, 1)
    assert match.url == "http://example.com/z"
    assert (match.x1, match.y1) == (first.index("http"), 0)
    assert match.y2 == 1


def test_open_url_on_click_spawns_opener():
    screen = Screen(40, 5, history=10)
    text = "go to https://example.com/path, now"
    put(screen, 2, text)
    with patch("tgrid.urls.subprocess.Popen") as popen:
        match = open_url_on_click(screen, text.index("path"), 2, "xdg-open")
    assert match.url == "https://example.com/path"
    assert popen.call_args.args[0] == ["xdg-open", "https://example.com/path"]


def test_open_url_on_click_without_url():
    screen = Screen(40, 5, history=10)
    with patch("tgrid.urls.subprocess.Popen") as popen:
        assert open_url_on_click(screen, 0, 0, "xdg-open") is None
    assert popen.call_count == 0