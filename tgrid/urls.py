"""Finding URLs in the grid: copy the last one, or the one under a click."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass

from .glyph import Attr, Glyph
from .screen import SEL_EMPTY, SEL_REGULAR, Screen

URL_CHARS = ("ABCDEFGHIJKLMNOPQRSTUVWXYZ"
             "abcdefghijklmnopqrstuvwxyz"
             "0123456789-._~:/?#@!$&'*+,;=%")

# A detected URL is held in a 2048-byte buffer split at its middle.
_BACK_MAX = 1025
_FORWARD_MAX = 1023
_TRAILING = ",.;:?!"


@dataclass(frozen=True)
class UrlMatch:
    """A URL found on screen and the cells to underline for it."""

    url: str
    x1: int
    y1: int
    x2: int
    y2: int


def is_url_char(u: int) -> bool:
    """Tell whether code point ``u`` may be part of a URL."""
    return u < 128 and u != 0 and chr(u) in URL_CHARS


def _row_text(screen: Screen, row: int) -> str:
    text = "".join(chr(g.u) for g in screen.lines[row][:screen.cols])
    return text.split("\0", 1)[0]


def copy_url(screen: Screen) -> str | None:
    """Select the last URL above the current selection and return its text.

    Rows are scanned upward from the selection (or the bottom of the
    scrolling region), wrapping round once; None when no URL is found.
    """
    sel = screen.sel
    row = sel.nb.y - 1 if sel.ob.x >= 0 and sel.nb.y > 0 else screen.bot
    row = max(screen.top, min(row, screen.bot))
    start = row
    while True:
        text = _row_text(screen, row)
        idx = text.find("http://")
        if idx < 0:
            idx = text.find("https://")
        if idx >= 0:
            break
        row -= 1
        if row < screen.top:
            row = screen.bot
        if row == start:
            return None

    url = text[idx:]
    end = next((i for i, ch in enumerate(url) if ch not in URL_CHARS), len(url))
    url = url[:end]

    if sel.active:
        sel.clear()
        screen.set_dirty(sel.nb.y, sel.ne.y)
    sel.ob.x = idx
    sel.mode = SEL_EMPTY
    sel.type = SEL_REGULAR
    sel.oe.x = idx + len(url) - 1
    sel.ob.y = sel.oe.y = row
    sel.normalize()
    screen.set_dirty(sel.nb.y, sel.ne.y)
    return screen.get_selection()


def _end_of_wrapped_line(screen: Screen, line: list[Glyph]) -> int:
    i = screen.cols - 1
    while True:
        if line[i].mode & Attr.WRAP:
            return i
        if line[i].mode & Attr.SET:
            return -1
        i -= 1
        if i < 0:
            return -1


def detect_url(screen: Screen, col: int, row: int) -> UrlMatch | None:
    """Return the http(s) URL covering cell ``(col, row)``, following wraps."""
    cols, rows = screen.cols, screen.rows
    if screen.alt:
        minrow, maxrow = 0, rows - 1
    else:
        minrow, maxrow = screen.scr - screen.histf, screen.scr + rows - 1

    line = screen.tline(row)
    if not is_url_char(line[col].u):
        return None

    maxcol = 0
    before: list[str] = []
    cs, rs = col, row
    x1, y1 = cs, rs
    while True:
        x1, y1 = cs, rs
        maxcol = max(maxcol, x1)
        before.append(chr(line[cs].u))
        cs -= 1
        if cs < 0:
            rs -= 1
            if rs < minrow:
                break
            cs = _end_of_wrapped_line(screen, screen.tline(rs))
            if cs < 0:
                break
            line = screen.tline(rs)
        if not (is_url_char(line[cs].u) and len(before) < _BACK_MAX):
            break

    if before[-1] != "h":
        return None

    line = screen.tline(row)
    after: list[str] = []
    c, r = col, row
    x2, y2 = c, r
    while True:
        x2, y2 = c, r
        maxcol = max(maxcol, x2)
        after.append(chr(line[c].u))
        wrapped = line[c].mode & Attr.WRAP
        c += 1
        if wrapped:
            r += 1
            if r > maxrow:
                break
            c = 0
            line = screen.tline(r)
        if not (c < cols and is_url_char(line[c].u) and len(after) < _FORWARD_MAX):
            break

    url = "".join(reversed(before)) + "".join(after[1:])
    if not (url.startswith("https://") or url.startswith("http://")):
        return None
    if url[-1] in _TRAILING:
        x2 = max(x2 - 1, 0)
        url = url[:-1]

    ux1 = x1 if y1 >= 0 else 0
    ux2 = x2 if y2 < rows else maxcol
    uy1 = max(y1, 0)
    uy2 = min(y2, rows - 1)
    for y in range(uy1, uy2 + 1):
        screen.dirty[y] = True
    return UrlMatch(url, ux1, uy1, ux2, uy2)


def open_url_on_click(screen: Screen, col: int, row: int,
                      opener: str = "xdg-open") -> UrlMatch | None:
    """Start ``opener`` on the URL under the click, if there is one."""
    match = detect_url(screen, col, row)
    if match is not None:
        try:
            subprocess.Popen([opener, match.url])
        except OSError:
            pass
    return match