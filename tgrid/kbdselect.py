"""Vim-like keyboard selection, search and cursor motion over the grid."""

from __future__ import annotations

import codecs
import unicodedata
from dataclasses import dataclass, field
from enum import IntFlag

from .glyph import Attr, Glyph
from .screen import (SEL_EMPTY, SEL_IDLE, SEL_READY, SEL_RECTANGULAR,
                     SEL_REGULAR, Screen, SnapMode)

WRAP_NONE = 0
WRAP_LINE = 1 << 0
WRAP_EDGE = 1 << 1

SHORT_DELIMITERS = "!\"#$%&'()*+,-./:;<=>?@[\\]^`{|}~ "
LONG_DELIMITERS = " "

_MAX_QUANT = 99999999

_MODE_NAMES = (" MOVE ", "", " SELECT ", " RSELECT ", " LSELECT ",
               " SEARCH FW ", " SEARCH BW ", " FIND FW ", " FIND BW ")

# left, up, right, down
_DIRECTIONS = {
    "h": 0, "k": 1, "l": 2, "j": 3,
    "Left": 0, "Up": 1, "Right": 2, "Down": 3,
    "KP_Left": 0, "KP_Up": 1, "KP_Right": 2, "KP_Down": 3,
}


class KbdsMode(IntFlag):
    """Sub-modes of keyboard selection."""

    MOVE = 0
    SELECT = 1 << 1
    LSELECT = 1 << 2
    FIND = 1 << 3
    SEARCH = 1 << 4


@dataclass
class KCursor:
    """A position in view coordinates with its line and line length."""

    x: int = 0
    y: int = 0
    line: list[Glyph] = field(default_factory=list)
    len: int = 0

    def copy(self) -> "KCursor":
        return KCursor(self.x, self.y, self.line, self.len)


def _is_wide(u: int) -> bool:
    return unicodedata.east_asian_width(chr(u)) in ("W", "F")


def _lower(u: int) -> int:
    low = chr(u).lower()
    return ord(low) if len(low) == 1 else u


def _digit(key: str) -> int | None:
    if len(key) == 1 and key.isdigit():
        return int(key)
    if key.startswith("KP_") and len(key) == 4 and key[3].isdigit():
        return int(key[3])
    return None


class KeyboardSelect:
    """Keyboard-driven cursor, selection and search on a :class:`Screen`.

    Keys are X keysym names such as ``"v"``, ``"Escape"`` or ``"KP_5"``.
    """

    def __init__(self, screen: Screen, short_delimiters: str = SHORT_DELIMITERS,
                 long_delimiters: str = LONG_DELIMITERS) -> None:
        self.screen = screen
        self.short_delimiters = short_delimiters
        self.long_delimiters = long_delimiters
        self.in_use = False
        self.quant = 0
        self.seltype = SEL_REGULAR
        self.mode = KbdsMode.MOVE
        self.direct_search = False
        self.search: list[Glyph] = []
        self.search_dir = 1
        self.search_case = False
        self.find_dir = 1
        self.find_till = False
        self.find_char = 0
        self.c = KCursor()
        self.oc = KCursor()
        self.clipboard: str | None = None
        self._decoder = codecs.getincrementaldecoder("utf-8")("replace")

    # -- bounds and predicates -----------------------------------------

    def _top(self) -> int:
        s = self.screen
        return 0 if s.alt else -s.histf + s.scr

    def _bot(self) -> int:
        s = self.screen
        return s.rows - 1 if s.alt else s.rows - 1 + s.scr

    @staticmethod
    def _wrapped(c: KCursor) -> bool:
        return c.len > 0 and bool(c.line[c.len - 1].mode & Attr.WRAP)

    def _load(self, c: KCursor) -> None:
        c.line = self.screen.tline(c.y)
        c.len = self.screen.line_len(c.line)

    def is_select_mode(self) -> bool:
        return self.in_use and bool(self.mode & (KbdsMode.SELECT | KbdsMode.LSELECT))

    def is_search_mode(self) -> bool:
        return self.in_use and bool(self.mode & KbdsMode.SEARCH)

    def _set_mode(self, mode: KbdsMode) -> None:
        self.mode = KbdsMode(mode)
        self.screen.dirty[0] = True

    # -- selection primitives ------------------------------------------

    def _sel_start(self, x: int, y: int) -> None:
        sel = self.screen.sel
        sel.clear()
        sel.mode = SEL_EMPTY
        sel.type = SEL_REGULAR
        sel.snap = SnapMode.NONE
        sel.alt = self.screen.alt
        sel.ob.x, sel.ob.y = x, y
        sel.oe.x, sel.oe.y = x, y
        sel.normalize()
        self.screen.full_dirty()

    def _sel_extend(self, x: int, y: int, sel_type: int, done: bool) -> None:
        sel = self.screen.sel
        if sel.mode == SEL_IDLE:
            return
        if done and sel.mode == SEL_EMPTY:
            sel.clear()
            return
        sel.oe.x, sel.oe.y = x, y
        sel.type = sel_type
        sel.normalize()
        sel.mode = SEL_IDLE if done else SEL_READY
        self.screen.full_dirty()

    def _sel_clear(self) -> None:
        self.screen.sel.clear()
        self.screen.full_dirty()

    def _select_text(self) -> None:
        if not self.is_select_mode():
            return
        if self.mode & KbdsMode.LSELECT:
            self._sel_extend(self.screen.cols - 1, self.c.y, SEL_RECTANGULAR, False)
        else:
            self._sel_extend(self.c.x, self.c.y, self.seltype, False)
        if self.screen.sel.mode == SEL_IDLE:
            self._set_mode(self.mode & ~(KbdsMode.SELECT | KbdsMode.LSELECT))

    def _copy_to_clipboard(self) -> None:
        if self.mode & KbdsMode.LSELECT:
            self._sel_extend(self.screen.cols - 1, self.c.y, SEL_RECTANGULAR, True)
            self.screen.sel.type = SEL_REGULAR
        else:
            self._sel_extend(self.c.x, self.c.y, self.seltype, True)
        self.clipboard = self.screen.get_selection()

    def _clear_highlights(self) -> None:
        s = self.screen
        for y in range(0 if s.alt else -s.histf, s.rows):
            for g in s.tline_abs(y)[:s.cols]:
                g.mode &= ~Attr.HIGHLIGHT
        s.full_dirty()

    # -- motion ----------------------------------------------------------

    def move_to(self, x: int, y: int) -> None:
        """Move the cursor, scrolling the view when ``y`` leaves the screen."""
        s = self.screen
        if y < 0:
            s.kscroll_up(-y)
        elif y >= s.rows:
            s.kscroll_down(y - s.rows + 1)
        self.c.x = max(0, min(x, s.cols - 1))
        self.c.y = max(0, min(y, s.rows - 1))
        self._load(self.c)
        if self.c.x > 0 and self.c.line[self.c.x].mode & Attr.WDUMMY:
            self.c.x -= 1

    def move_forward(self, cursor: KCursor, dx: int, wrap: int) -> KCursor | None:
        """Return ``cursor`` moved ``dx`` cells, or None if it cannot move."""
        cols = self.screen.cols
        n = cursor.copy()
        n.x += dx
        if 0 <= n.x < cols and n.line[n.x].mode & Attr.WDUMMY:
            n.x += dx
        if n.x < 0:
            if not wrap:
                return None
            n.y -= 1
            if n.y < self._top():
                return None
            self._load(n)
            if wrap & WRAP_LINE and self._wrapped(n):
                n.x = n.len - 1
            elif wrap & WRAP_EDGE:
                n.x = cols - 1
            else:
                return None
            if n.x > 0 and n.line[n.x].mode & Attr.WDUMMY:
                n.x -= 1
        elif n.x >= cols:
            if (wrap & WRAP_EDGE or (wrap & WRAP_LINE and self._wrapped(n))) \
                    and n.y + 1 <= self._bot():
                n.y += 1
                self._load(n)
                n.x = 0
            else:
                return None
        elif n.x >= n.len and dx > 0 and wrap & WRAP_LINE:
            if n.x == n.len and self._wrapped(n) and n.y < self._bot():
                n.y += 1
                self._load(n)
                n.x = 0
            elif not wrap & WRAP_EDGE:
                return None
        return n

    # -- search ----------------------------------------------------------

    def _is_match(self, c: KCursor) -> bool:
        if c.x + len(self.search) > c.len and (not self._wrapped(c) or c.y >= self._bot()):
            return False
        cur: KCursor | None = c
        first = True
        for g in self.search:
            if g.mode & Attr.WDUMMY:
                continue
            if not first:
                cur = self.move_forward(cur, 1, WRAP_LINE)
                if cur is None:
                    return False
            first = False
            u = cur.line[cur.x].u
            if g.u != (u if self.search_case else _lower(u)):
                return False
        m = c.copy()
        for g in self.search:
            if not g.mode & Attr.WDUMMY:
                m.line[m.x].mode |= Attr.HIGHLIGHT
                nm = self.move_forward(m, 1, WRAP_LINE)
                if nm is not None:
                    m = nm
        return True

    def search_all(self) -> int:
        """Highlight every match of the search string; return the count."""
        if not self.search:
            return 0
        count = 0
        for y in range(self._top(), self._bot() + 1):
            c = KCursor(0, y)
            self._load(c)
            for x in range(c.len):
                c.x = x
                count += self._is_match(c)
        self.screen.full_dirty()
        return count

    def search_next(self, direction: int) -> None:
        """Move to the next (``direction`` > 0) or previous match."""
        if not self.search:
            self.quant = 0
            return
        c, n = self.c.copy(), self.c.copy()
        wrapped = 0
        if direction < 0 and c.x > c.len:
            c.x = c.len
        self.quant = max(self.quant, 1)
        while self.quant > 0:
            nc = self.move_forward(c, direction, WRAP_LINE)
            if nc is None:
                c.y += direction
                if c.y < self._top():
                    c.y = self._bot()
                    wrapped += 1
                elif c.y > self._bot():
                    c.y = self._top()
                    wrapped += 1
                if wrapped > 1:
                    break
                self._load(c)
                c.x = c.len - 1 if direction < 0 and c.len > 0 else 0
                if c.x > 0 and c.line[c.x].mode & Attr.WDUMMY:
                    c.x -= 1
            else:
                c = nc
            if self._is_match(c):
                n = c.copy()
                self.quant -= 1
        self.move_to(n.x, n.y)
        self.quant = 0

    def find_next(self, direction: int, repeat: bool) -> None:
        """Move to the next occurrence of the find character on the line."""
        c, n = self.c.copy(), self.c.copy()
        if c.len <= 0 or self.find_char == 0:
            self.quant = 0
            return
        if direction < 0 and c.x > c.len:
            c.x = c.len
        yoff = 0
        self.quant = max(self.quant, 1)
        skipfirst = self.quant == 1 and repeat and self.find_till
        while self.quant > 0:
            prev = c
            nc = self.move_forward(c, direction, WRAP_LINE)
            if nc is None:
                break
            c = nc
            if c.line[c.x].u == self.find_char:
                if skipfirst and prev.x == self.c.x and prev.y == self.c.y:
                    skipfirst = False
                    continue
                n.x = prev.x if self.find_till else c.x
                n.y = c.y
                yoff = prev.y - c.y if self.find_till else 0
                self.quant -= 1
        self.move_to(n.x, n.y)
        self.move_to(self.c.x, self.c.y + yoff)
        self.quant = 0

    def _is_delim(self, c: KCursor, xoff: int, delims: str) -> bool:
        if xoff:
            nc = self.move_forward(c, xoff, WRAP_LINE)
            if nc is None:
                return True
            c = nc
        return chr(c.line[c.x].u) in delims

    def next_word(self, start: bool, direction: int, delims: str) -> None:
        """Move to the next word start (``start``) or end in ``direction``."""
        c, n = self.c.copy(), self.c.copy()
        xoff = -1 if start else 1
        if direction < 0 and c.x > c.len:
            c.x = c.len
        elif direction > 0 and c.x >= c.len and c.len > 0:
            c.x = c.len - 1
        self.quant = max(self.quant, 1)
        while self.quant > 0:
            nc = self.move_forward(c, direction, WRAP_LINE)
            if nc is None:
                c.y += direction
                if c.y < self._top() or c.y > self._bot():
                    break
                self._load(c)
                c.x = c.len - 1 if direction < 0 and c.len > 0 else 0
                if c.x > 0 and c.line[c.x].mode & Attr.WDUMMY:
                    c.x -= 1
            else:
                c = nc
            if c.len > 0 and not self._is_delim(c, 0, delims) \
                    and self._is_delim(c, xoff, delims):
                n = c.copy()
                self.quant -= 1
        self.move_to(n.x, n.y)
        self.quant = 0

    # -- search string input -------------------------------------------

    def _add_search_char(self, u: int) -> None:
        limit = self.screen.cols - 2
        if len(self.search) >= limit:
            return
        wide = _is_wide(u)
        self.search.append(Glyph(u, Attr.WIDE if wide else Attr.NULL))
        if wide and len(self.search) < limit:
            self.search.append(Glyph(0, Attr.WDUMMY))

    def paste_into_search(self, data: str | bytes, append: bool = False) -> None:
        """Add pasted text to the search string; bytes may split a UTF-8 sequence."""
        if not append:
            self._decoder.reset()
        text = self._decoder.decode(data) if isinstance(data, bytes) else data
        for ch in text:
            if ord(ch) > 0x1F:
                self._add_search_char(ord(ch))
        self.screen.dirty[self.screen.rows - 1] = True

    # -- status ----------------------------------------------------------

    def status_bar(self, y: int) -> list[tuple[int, Glyph]]:
        """Return the ``(column, glyph)`` cells to overlay on row ``y``."""
        if not self.in_use:
            return []
        s = self.screen
        out: list[tuple[int, Glyph]] = []

        def cell(col: int, u: int, mode: Attr = Attr.REVERSE) -> None:
            out.append((col, Glyph(u, mode)))

        if y == 0:
            if self.is_search_mode():
                m = 5 + (1 if self.search_dir < 0 else 0)
            elif self.mode & KbdsMode.FIND:
                m = 7 + (1 if self.find_dir < 0 else 0)
            elif self.mode & KbdsMode.SELECT:
                m = 2 + (1 if self.seltype == SEL_RECTANGULAR else 0)
            else:
                m = int(self.mode)
            label = _MODE_NAMES[m]
            quant = f" {self.quant}" if self.quant else ""
            if self.c.y != y or self.c.x < s.cols - len(quant) - len(label):
                text = quant + label
                start = s.cols - len(text)
                for i, ch in enumerate(text):
                    if start + i >= 0:
                        cell(start + i, ord(ch))
        if y == s.rows - 1 and self.is_search_mode():
            for i in range(s.cols):
                cell(i, 0x20)
            cell(0, ord("/" if self.search_dir > 0 else "?"))
            for i, g in enumerate(self.search):
                if g.u == 0x20 or g.mode & Attr.WDUMMY:
                    continue
                cell(i + 1, g.u, g.mode | Attr.WIDE | Attr.REVERSE)
            cell(len(self.search) + 1, 0x20, Attr.NULL)
        return out

    # -- entry points ----------------------------------------------------

    def start(self) -> bool:
        """Enter keyboard selection at the terminal cursor."""
        self.search = []
        self.in_use = True
        self.move_to(self.screen.cursor.x, self.screen.cursor.y)
        self.oc = self.c.copy()
        self._set_mode(KbdsMode.MOVE)
        return True

    def _begin_search(self, direction: int, direct: bool) -> None:
        self.direct_search = direct
        self.search_dir = direction
        self.search = []
        self._set_mode(self.mode | KbdsMode.SEARCH)
        self._clear_highlights()

    def search_forward(self) -> bool:
        """Enter keyboard selection and start a forward search."""
        toggled = self.start()
        self._begin_search(1, True)
        return toggled

    def search_backward(self) -> bool:
        """Enter keyboard selection and start a backward search."""
        toggled = self.start()
        self._begin_search(-1, True)
        return toggled

    def _exit(self) -> bool:
        if self.is_select_mode():
            self._copy_to_clipboard()
        self.in_use = False
        self.quant = 0
        self.search = []
        self.screen.kscroll_down(self.screen.histf)
        self._clear_highlights()
        return True

    def handle_key(self, key: str, text: str = "", force_quit: bool = False) -> bool:
        """Handle one key; return True when keyboard selection is left."""
        s = self.screen
        if self.is_search_mode() and not force_quit:
            if key in ("Escape", "Return"):
                if key == "Escape":
                    self.search = []
                self.search_case = any(g.u != _lower(g.u) for g in self.search)
                count = self.search_all()
                self.search_next(self.search_dir)
                self._select_text()
                self._set_mode(self.mode & ~KbdsMode.SEARCH)
                if count == 0 and self.direct_search:
                    key = "Escape"
            elif key == "BackSpace":
                if self.search:
                    removed = self.search.pop()
                    if self.search and removed.mode & Attr.WDUMMY:
                        self.search.pop()
            else:
                if not text or len(self.search) >= s.cols - 2:
                    return False
                self._add_search_char(ord(text[0]))
            if not (key == "Escape" and self.direct_search):
                s.dirty[s.rows - 1] = True
                return False
        elif self.mode & KbdsMode.FIND and not force_quit:
            self.find_char = 0
            if key in ("Escape", "Return"):
                self.quant = 0
            else:
                if not text:
                    return False
                self.find_char = ord(text[0])
                self.find_next(self.find_dir, False)
                self._select_text()
            self._set_mode(self.mode & ~KbdsMode.FIND)
            return False

        alt = s.alt
        c = self.c
        if key == "V":
            if self.mode & KbdsMode.LSELECT:
                self._sel_clear()
                self._set_mode(self.mode & ~(KbdsMode.SELECT | KbdsMode.LSELECT))
            elif self.mode & KbdsMode.SELECT:
                self._sel_extend(s.cols - 1, c.y, SEL_RECTANGULAR, False)
                s.sel.ob.x = 0
                s.full_dirty()
                self._set_mode((self.mode ^ KbdsMode.SELECT) | KbdsMode.LSELECT)
            else:
                self._sel_start(0, c.y)
                self._sel_extend(s.cols - 1, c.y, SEL_RECTANGULAR, False)
                self._set_mode(self.mode | KbdsMode.LSELECT)
        elif key == "v":
            if self.mode & KbdsMode.SELECT:
                self._sel_clear()
                self._set_mode(self.mode & ~(KbdsMode.SELECT | KbdsMode.LSELECT))
            elif self.mode & KbdsMode.LSELECT:
                self._sel_extend(c.x, c.y, self.seltype, False)
                self._set_mode((self.mode ^ KbdsMode.LSELECT) | KbdsMode.SELECT)
            else:
                self._sel_start(c.x, c.y)
                self._set_mode(self.mode | KbdsMode.SELECT)
        elif key == "s":
            if not self.mode & KbdsMode.LSELECT:
                self.seltype ^= SEL_REGULAR | SEL_RECTANGULAR
                self._sel_extend(c.x, c.y, self.seltype, False)
        elif key in ("y", "Y"):
            if self.is_select_mode():
                self._copy_to_clipboard()
                self._sel_clear()
                self._set_mode(self.mode & ~(KbdsMode.SELECT | KbdsMode.LSELECT))
        elif key in ("slash", "KP_Divide", "question"):
            self._begin_search(-1 if key == "question" else 1, False)
            return False
        elif key in ("q", "Escape"):
            if not self.in_use:
                return False
            if self.quant and not force_quit:
                self.quant = 0
            else:
                self._sel_clear()
                if self.is_select_mode() and not force_quit:
                    self._set_mode(KbdsMode.MOVE)
                else:
                    self._set_mode(KbdsMode.MOVE)
                    return self._exit()
        elif key == "Return":
            return self._exit()
        elif key in ("n", "N"):
            self.search_next(self.search_dir if key == "n" else -self.search_dir)
        elif key == "BackSpace":
            self.move_to(0, c.y)
        elif key == "exclam":
            self.move_to(s.cols // 2, c.y)
        elif key == "underscore":
            self.move_to(s.cols - 1, c.y)
        elif key in ("dollar", "A"):
            eol = c.len - 1
            islast = c.x == eol or (c.x == eol - 1 and eol >= 1
                                    and bool(c.line[eol - 1].mode & Attr.WIDE))
            if islast and self._wrapped(c) and c.y < self._bot():
                self.move_to(s.line_len(s.tline(c.y + 1)) - 1, c.y + 1)
            else:
                self.move_to(s.cols - 1 if islast else eol, c.y)
        elif key in ("asciicircum", "I"):
            i = 0
            while i < c.len and c.line[i].u == 0x20:
                i += 1
            self.move_to(i if i < c.len else 0, c.y)
        elif key in ("End", "KP_End"):
            self.move_to(c.x, s.rows - 1)
        elif key in ("Home", "KP_Home", "H"):
            self.move_to(c.x, 0)
        elif key == "M":
            self.move_to(c.x, (s.rows - 1) // 2 if alt
                         else min(s.cursor.y + s.scr, s.rows - 1) // 2)
        elif key == "L":
            self.move_to(c.x, s.rows - 1 if alt else min(s.cursor.y + s.scr, s.rows - 1))
        elif key in ("Prior", "Page_Up", "KP_Prior", "KP_Page_Up", "K"):
            prevscr = s.scr
            s.kscroll_up(s.rows)
            self.move_to(c.x, 0 if alt else max(0, c.y - s.rows + s.scr - prevscr))
        elif key in ("Next", "Page_Down", "KP_Next", "KP_Page_Down", "J"):
            prevscr = s.scr
            s.kscroll_down(s.rows)
            self.move_to(c.x, s.rows - 1 if alt else min(
                min(s.cursor.y + s.scr, s.rows - 1), c.y + s.rows + s.scr - prevscr))
        elif key in ("asterisk", "KP_Multiply"):
            self.move_to(s.cols // 2, (s.rows - 1) // 2)
        elif key == "g":
            s.kscroll_up(s.histf)
            self.move_to(c.x, 0)
        elif key == "G":
            s.kscroll_down(s.histf)
            self.move_to(c.x, s.rows - 1 if alt else s.cursor.y)
        elif key in ("b", "B"):
            self.next_word(True, -1, self.short_delimiters if key == "b" else self.long_delimiters)
        elif key in ("w", "W"):
            self.next_word(True, 1, self.short_delimiters if key == "w" else self.long_delimiters)
        elif key in ("e", "E"):
            self.next_word(False, 1, self.short_delimiters if key == "e" else self.long_delimiters)
        elif key == "z":
            prevscr = s.scr
            dy = c.y - (s.rows - 1) // 2
            if dy <= 0:
                s.kscroll_up(-dy)
            else:
                s.kscroll_down(dy)
            self.move_to(c.x, c.y + s.scr - prevscr)
        elif key in ("f", "F", "t", "T"):
            self.find_dir = 1 if key in ("f", "t") else -1
            self.find_till = key in ("t", "T")
            self._set_mode(self.mode | KbdsMode.FIND)
            return False
        elif key in ("semicolon", "r"):
            self.find_next(self.find_dir, True)
        elif key in ("comma", "R"):
            self.find_next(-self.find_dir, True)
        elif key in ("0", "KP_0") and not self.quant:
            self.move_to(0, c.y)
        else:
            digit = _digit(key)
            if digit is not None:
                q = self.quant * 10 + digit
                self.quant = q if q <= _MAX_QUANT else self.quant
                s.dirty[0] = True
                return False
            if key not in _DIRECTIONS:
                return False
            i = _DIRECTIONS[key]
            self.quant = self.quant or 1
            if i & 1:
                c.y += self.quant * (1 if i & 2 else -1)
            else:
                while self.quant > 0:
                    nc = self.move_forward(self.c, 1 if i & 2 else -1, WRAP_LINE | WRAP_EDGE)
                    if nc is None:
                        break
                    self.c = nc
                    self.quant -= 1
            self.move_to(self.c.x, self.c.y)
        self._select_text()
        self.quant = 0
        s.dirty[0] = True
        return False