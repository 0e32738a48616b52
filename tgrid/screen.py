"""The terminal grid with scrollback, reflow on resize and selection."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum

from .glyph import DEFAULT_BG, DEFAULT_FG, Attr, Glyph, blank_line

SEL_IDLE = 0
SEL_EMPTY = 1
SEL_READY = 2

SEL_REGULAR = 1
SEL_RECTANGULAR = 2


class ScrollMode(Enum):
    """How a scroll treats the history buffer."""

    NOSAVEHIST = 0
    RESIZE = 1
    SAVEHIST = 2


class SnapMode(IntEnum):
    """How a selection end snaps to text."""

    NONE = 0
    WORD = 1
    LINE = 2


@dataclass
class _Point:
    x: int = -1
    y: int = 0


@dataclass
class Cursor:
    """Cursor position, current attributes and pending wrap state."""

    x: int = 0
    y: int = 0
    attr: Glyph = field(default_factory=Glyph)
    wrap_next: bool = False

    def copy(self) -> "Cursor":
        return replace(self, attr=self.attr.copy())


@dataclass
class Selection:
    """Selection anchors (``ob``/``oe``) and their ordered form (``nb``/``ne``)."""

    mode: int = SEL_IDLE
    type: int = SEL_REGULAR
    snap: SnapMode = SnapMode.NONE
    ob: _Point = field(default_factory=_Point)
    oe: _Point = field(default_factory=_Point)
    nb: _Point = field(default_factory=_Point)
    ne: _Point = field(default_factory=_Point)
    alt: bool = False

    @property
    def active(self) -> bool:
        return self.ob.x != -1

    def move(self, n: int) -> None:
        """Shift every row of the selection by ``n``."""
        self.ob.y += n
        self.nb.y += n
        self.oe.y += n
        self.ne.y += n

    def clear(self) -> None:
        """Drop the selection."""
        self.mode = SEL_IDLE
        self.ob.x = -1

    def normalize(self) -> None:
        """Order the anchors into ``nb`` (begin) and ``ne`` (end)."""
        ob, oe = self.ob, self.oe
        if self.type == SEL_REGULAR and ob.y != oe.y:
            self.nb.x = ob.x if ob.y < oe.y else oe.x
            self.ne.x = oe.x if ob.y < oe.y else ob.x
        else:
            self.nb.x = min(ob.x, oe.x)
            self.ne.x = max(ob.x, oe.x)
        self.nb.y = min(ob.y, oe.y)
        self.ne.y = max(ob.y, oe.y)


class Screen:
    """Main and alternate screens with a ring buffer of history lines."""

    def __init__(self, cols: int = 80, rows: int = 24, history: int = 2000,
                 tabspaces: int = 8, word_delimiters: str = " ") -> None:
        self.cols = cols
        self.rows = rows
        self.histsize = history
        self.tabspaces = tabspaces
        self.word_delimiters = word_delimiters
        self.lines: list[list[Glyph]] = [blank_line(cols) for _ in range(rows)]
        self._alt_lines: list[list[Glyph]] = [blank_line(cols) for _ in range(rows)]
        self._alt_cols = cols
        self._alt_rows = rows
        self.alt = False
        self.hist: list[list[Glyph]] = [blank_line(cols) for _ in range(history)]
        self.histi = 0
        self.histf = 0
        self.scr = 0
        self.top = 0
        self.bot = rows - 1
        self.cursor = Cursor()
        self._saved = [Cursor(), Cursor()]
        self.wrapcwidth = [1, 1]
        self.dirty = [True] * rows
        self.tabs = [False] * cols
        for i in range(tabspaces, cols, tabspaces):
            self.tabs[i] = True
        self.sel = Selection()

    # -- line access ---------------------------------------------------

    def tline(self, y: int) -> list[Glyph]:
        """Line ``y`` in view coordinates (history above the screen)."""
        if y < self.scr:
            return self.hist[(self.histi + y - self.scr + 1 + self.histsize) % self.histsize]
        return self.lines[y - self.scr]

    def tline_abs(self, y: int) -> list[Glyph]:
        """Line ``y`` in absolute coordinates; negative rows are history."""
        if y < 0:
            return self.hist[(self.histi + y + 1 + self.histsize) % self.histsize]
        return self.lines[y]

    def line_len(self, line: list[Glyph]) -> int:
        i = self.cols - 1
        if self.alt:
            while i >= 0 and not (line[i].mode & Attr.WRAP) and line[i].u == 0x20:
                i -= 1
        else:
            while i >= 0 and not (line[i].mode & (Attr.SET | Attr.WRAP)):
                i -= 1
        return i + 1

    def is_wrapped(self, line: list[Glyph]) -> bool:
        n = self.line_len(line)
        return n > 0 and bool(line[n - 1].mode & Attr.WRAP)

    # -- helpers -------------------------------------------------------

    def _clear_glyph(self, g: Glyph, use_cur_attr: bool) -> None:
        if use_cur_attr:
            g.fg, g.bg = self.cursor.attr.fg, self.cursor.attr.bg
        else:
            g.fg, g.bg = DEFAULT_FG, DEFAULT_BG
        g.mode = Attr.NULL
        g.u = 0x20

    def _blank(self, cols: int, use_cur_attr: bool = False) -> list[Glyph]:
        if use_cur_attr:
            return blank_line(cols, self.cursor.attr.fg, self.cursor.attr.bg)
        return blank_line(cols)

    def full_dirty(self) -> None:
        self.dirty = [True] * self.rows

    def set_dirty(self, top: int, bot: int) -> None:
        top = max(0, min(top, self.rows - 1))
        bot = max(0, min(bot, self.rows - 1))
        for i in range(top, bot + 1):
            self.dirty[i] = True

    def _sel_clear(self) -> None:
        if not self.sel.active:
            return
        self.sel.clear()
        self.set_dirty(self.sel.nb.y, self.sel.ne.y)

    def _update_wrap_next(self, alt: int, col: int) -> None:
        c = self.cursor
        if c.wrap_next and c.x + self.wrapcwidth[alt] < col:
            c.x += self.wrapcwidth[alt]
            c.wrap_next = False

    def _save_cursor(self) -> None:
        self._saved[int(self.alt)] = self.cursor.copy()

    def _load_cursor(self) -> None:
        c = self._saved[int(self.alt)].copy()
        c.x = max(0, min(c.x, self.cols - 1))
        c.y = max(0, min(c.y, self.rows - 1))
        self.cursor = c

    # -- editing -------------------------------------------------------

    def clear_region(self, x1: int, y1: int, x2: int, y2: int,
                     use_cur_attr: bool = True) -> None:
        s = self.scr
        if self.region_selected(x1 + s, y1 + s, x2 + s, y2 + s):
            self.sel.clear()
        for y in range(y1, y2 + 1):
            self.dirty[y] = True
            for g in self.lines[y][x1:x2 + 1]:
                self._clear_glyph(g, use_cur_attr)

    def delete_char(self, n: int) -> None:
        if n <= 0:
            return
        c = self.cursor
        dst = c.x
        src = min(c.x + n, self.cols)
        size = self.cols - src
        if size > 0:
            line = self.lines[c.y]
            line[dst:dst + size] = [g.copy() for g in line[src:src + size]]
        self.clear_region(dst + size, c.y, self.cols - 1, c.y, True)

    def insert_blank(self, n: int) -> None:
        if n <= 0:
            return
        c = self.cursor
        dst = min(c.x + n, self.cols)
        src = c.x
        size = self.cols - dst
        if size > 0:
            line = self.lines[c.y]
            line[dst:dst + size] = [g.copy() for g in line[src:src + size]]
        self.clear_region(src, c.y, dst - 1, c.y, True)

    # -- scrolling -----------------------------------------------------

    def scroll_up(self, top: int, bot: int, n: int,
                  mode: ScrollMode = ScrollMode.SAVEHIST) -> None:
        alt = self.alt
        savehist = not alt and top == 0 and mode != ScrollMode.NOSAVEHIST
        scr = 0 if alt else self.scr
        if n <= 0:
            return
        n = min(n, bot - top + 1)
        s = 0
        if savehist:
            for i in range(n):
                self.histi = (self.histi + 1) % self.histsize
                self.hist[self.histi], self.lines[i] = self.lines[i], self._blank(self.cols, True)
            self.histf = min(self.histf + n, self.histsize)
            s = n
            if self.scr:
                j = self.scr
                self.scr = min(j + n, self.histsize)
                s = j + n - self.scr
            if mode != ScrollMode.RESIZE:
                self.full_dirty()
        else:
            self.clear_region(0, top, self.cols - 1, top + n - 1, True)
            self.set_dirty(top + scr, bot + scr)
        for i in range(top, bot - n + 1):
            self.lines[i], self.lines[i + n] = self.lines[i + n], self.lines[i]
        if self.sel.active and self.sel.alt == alt:
            if not savehist:
                self.sel_scroll(top, bot, -n)
            elif s > 0:
                self.sel.move(-s)
                if -self.scr + self.sel.nb.y < -self.histf:
                    self.sel.clear()

    def scroll_down(self, top: int, n: int) -> None:
        bot = self.bot
        scr = 0 if self.alt else self.scr
        if n <= 0:
            return
        n = min(n, bot - top + 1)
        self.set_dirty(top + scr, bot + scr)
        self.clear_region(0, bot - n + 1, self.cols - 1, bot, True)
        for i in range(bot, top + n - 1, -1):
            self.lines[i], self.lines[i - n] = self.lines[i - n], self.lines[i]
        if self.sel.active and self.sel.alt == self.alt:
            self.sel_scroll(top, bot, n)

    def kscroll_down(self, n: int) -> None:
        """Scroll the view ``n`` lines toward the bottom."""
        if not self.scr or self.alt:
            return
        if n < 0:
            n = max(self.rows // -n, 1)
        if n <= self.scr:
            self.scr -= n
        else:
            n = self.scr
            self.scr = 0
        if self.sel.active and not self.sel.alt:
            self.sel.move(-n)
        self.full_dirty()

    def kscroll_up(self, n: int) -> None:
        """Scroll the view ``n`` lines back into history."""
        if not self.histf or self.alt:
            return
        if n < 0:
            n = max(self.rows // -n, 1)
        if self.scr + n <= self.histf:
            self.scr += n
        else:
            n = self.histf - self.scr
            self.scr = self.histf
        if self.sel.active and not self.sel.alt:
            self.sel.move(n)
        self.full_dirty()

    def _rscroll_down(self, n: int) -> None:
        n = min(n, self.histf)
        if n <= 0:
            return
        i = self.cursor.y + n
        while i >= n:
            self.lines[i], self.lines[i - n] = self.lines[i - n], self.lines[i]
            i -= 1
        while i >= 0:
            self.lines[i], self.hist[self.histi] = self.hist[self.histi], self.lines[i]
            self.histi = (self.histi - 1 + self.histsize) % self.histsize
            i -= 1
        self.cursor.y += n
        self.histf -= n
        i = self.scr - n
        if i >= 0:
            self.scr = i
        else:
            self.scr = 0
            if self.sel.active and not self.sel.alt:
                self.sel.move(-i)

    # -- resizing ------------------------------------------------------

    def resize(self, cols: int, rows: int) -> None:
        self.dirty = [True] * rows
        if cols > self.cols:
            self.tabs.extend([False] * (cols - self.cols))
            bp = self.cols
            bp -= 1
            while bp > 0 and not self.tabs[bp]:
                bp -= 1
            bp += self.tabspaces
            while bp < cols:
                self.tabs[bp] = True
                bp += self.tabspaces
        else:
            del self.tabs[cols:]
        if self.alt:
            self._resize_alt(cols, rows)
        else:
            self._resize_def(cols, rows)

    def _resize_def(self, col: int, row: int) -> None:
        if self.cols == col and self.rows == row:
            self.full_dirty()
            return
        if col != self.cols:
            if not self.sel.alt:
                self.sel.clear()
            self.reflow(col, row)
        else:
            if self.cursor.y >= row:
                self.scroll_up(0, self.rows - 1, self.cursor.y - row + 1, ScrollMode.RESIZE)
                self.cursor.y = row - 1
            del self.lines[row:]
            self.lines.extend(blank_line(col) for _ in range(self.rows, row))
            self._rscroll_down(row - self.rows)
        self.cols, self.rows = col, row
        self.top, self.bot = 0, row - 1
        self.dirty = [True] * row

    def _resize_alt(self, col: int, row: int) -> None:
        if self.cols == col and self.rows == row:
            self.full_dirty()
            return
        if self.sel.alt:
            self.sel.clear()
        c = self.cursor
        drop = max(0, c.y - row + 1)
        if drop > 0:
            self.lines = self.lines[drop:drop + row]
            c.y = row - 1
        else:
            del self.lines[row:]
        for i, line in enumerate(self.lines):
            if col > self.cols:
                line.extend(blank_line(col - len(line)))
            else:
                del line[col:]
        self.lines.extend(blank_line(col) for _ in range(len(self.lines), row))
        if c.x >= col:
            c.wrap_next = False
            c.x = col - 1
        else:
            self._update_wrap_next(1, col)
        self.cols, self.rows = col, row
        self.top, self.bot = 0, row - 1
        self.dirty = [True] * row

    def reflow(self, cols: int, rows: int) -> None:
        """Rewrap history and screen lines to a new width."""
        col, row = cols, rows
        c = self.cursor
        H = self.histsize
        oce = c.y
        while oce < self.rows - 1 and self.is_wrapped(self.lines[oce]):
            oce += 1
        nlines = H + row
        buf: list[list[Glyph] | None] = [None] * nlines
        ox, oy, nx, ny = 0, -self.histf, 0, -1
        cy = -1
        line: list[Glyph] = []
        length = 0
        bufline: list[Glyph] = []
        while True:
            if not nx:
                ny += 1
                buf[ny % nlines] = blank_line(col)
            if not ox:
                line = self.tline_abs(oy)
                length = self.line_len(line)
            if oy == c.y:
                if not ox:
                    length = max(length, c.x + 1)
                if cy < 0 and c.x - ox < col - nx:
                    c.x = nx + c.x - ox
                    cy = ny
                    self._update_wrap_next(0, col)
            bufline = buf[ny % nlines]  # type: ignore[assignment]
            if col - nx > length - ox:
                bufline[nx:nx + length - ox] = [g.copy() for g in line[ox:length]]
                nx += length - ox
                if length == 0 or not (line[length - 1].mode & Attr.WRAP):
                    for g in bufline[nx:col]:
                        self._clear_glyph(g, False)
                    nx = 0
                elif nx > 0:
                    bufline[nx - 1].mode &= ~Attr.WRAP
                ox = 0
                oy += 1
            elif col - nx == length - ox:
                bufline[nx:col] = [g.copy() for g in line[ox:ox + col - nx]]
                ox, nx = 0, 0
                oy += 1
            else:
                bufline[nx:col] = [g.copy() for g in line[ox:ox + col - nx]]
                if bufline[col - 1].mode & Attr.WIDE:
                    bufline[col - 2].mode |= Attr.WRAP
                    self._clear_glyph(bufline[col - 1], False)
                    ox -= 1
                else:
                    bufline[col - 1].mode |= Attr.WRAP
                ox += col - nx
                nx = 0
            if oy > oce:
                break
        if nx:
            for g in bufline[nx:col]:
                self._clear_glyph(g, False)

        buflen = min(ny + 1, nlines)
        bot = min(ny, row - 1)
        scr = max(row - self.rows, 0)
        nce = min(oce + scr, bot)
        c.y = nce - (ny - cy)
        if c.y < 0:
            j = nce
            nce = min(nce - c.y, bot)
            c.y += nce - j
            while c.y < 0:
                buf[ny % nlines] = None
                ny -= 1
                buflen -= 1
                c.y += 1
        new_lines: list[list[Glyph]] = [[] for _ in range(row)]
        i = row - 1
        while i > nce:
            new_lines[i] = blank_line(col)
            i -= 1
        while i >= 0:
            new_lines[i] = buf[ny % nlines]  # type: ignore[assignment]
            i -= 1
            ny -= 1
            buflen -= 1
        while buflen > 0 and i >= -H:
            j = (self.histi + i + 1 + H) % H
            self.hist[j] = buf[ny % nlines]  # type: ignore[assignment]
            i -= 1
            ny -= 1
            buflen -= 1
        self.histf = -i - 1
        self.scr = min(self.scr, self.histf)
        while i >= -H:
            j = (self.histi + i + 1 + H) % H
            h = self.hist[j]
            del h[col:]
            h.extend(blank_line(col - len(h)))
            i -= 1
        self.lines = new_lines

    # -- screens -------------------------------------------------------

    def swap_screen(self) -> None:
        self.lines, self._alt_lines = self._alt_lines, self.lines
        self.cols, self._alt_cols = self._alt_cols, self.cols
        self.rows, self._alt_rows = self._alt_rows, self.rows
        self.alt = not self.alt

    def load_def_screen(self, clear: bool, load_cursor: bool) -> None:
        alt = self.alt
        col = row = 0
        if alt:
            if clear:
                self.clear_region(0, 0, self.cols - 1, self.rows - 1, True)
            col, row = self.cols, self.rows
            self.swap_screen()
        if load_cursor:
            self._load_cursor()
        if alt:
            self._resize_def(col, row)

    def load_alt_screen(self, clear: bool, save_cursor: bool) -> None:
        if save_cursor:
            self._save_cursor()
        if not self.alt:
            col, row = self.cols, self.rows
            self.kscroll_down(self.scr)
            self.swap_screen()
            self._resize_alt(col, row)
        if clear:
            self.clear_region(0, 0, self.cols - 1, self.rows - 1, True)

    # -- text ----------------------------------------------------------

    @staticmethod
    def _glyph_text(glyphs: list[Glyph]) -> str:
        return "".join(chr(g.u) for g in glyphs if not g.mode & Attr.WDUMMY)

    def get_line(self, y: int) -> str:
        """Text of screen row ``y``, ending in a newline unless it wraps."""
        line = self.lines[y]
        last = self.cols - 1
        while last > 0 and not (line[last].mode & (Attr.SET | Attr.WRAP)):
            last -= 1
        text = self._glyph_text(line[:last + 1])
        if not line[last].mode & Attr.WRAP:
            text += "\n"
        return text

    # -- selection -----------------------------------------------------

    def region_selected(self, x1: int, y1: int, x2: int, y2: int) -> bool:
        s = self.sel
        if (not s.active or s.mode == SEL_EMPTY or s.alt != self.alt
                or s.nb.y > y2 or s.ne.y < y1):
            return False
        if s.type == SEL_RECTANGULAR:
            return s.nb.x <= x2 and s.ne.x >= x1
        return (s.nb.y != y2 or s.nb.x <= x2) and (s.ne.y != y1 or s.ne.x >= x1)

    def selected(self, x: int, y: int) -> bool:
        return self.region_selected(x, y, x, y)

    def get_selection(self) -> str | None:
        s = self.sel
        if not s.active or s.alt != self.alt:
            return None
        out: list[str] = []
        for y in range(s.nb.y, s.ne.y + 1):
            line = self.tline(y)
            linelen = self.line_len(line)
            if linelen == 0:
                out.append("\n")
                continue
            if s.type == SEL_RECTANGULAR:
                first, lastx = s.nb.x, s.ne.x
            else:
                first = s.nb.x if s.nb.y == y else 0
                lastx = s.ne.x if s.ne.y == y else self.cols - 1
            last = min(lastx, linelen - 1)
            out.append(self._glyph_text(line[first:last + 1]))
            if ((y < s.ne.y or lastx >= linelen)
                    and (not line[last].mode & Attr.WRAP or s.type == SEL_RECTANGULAR)):
                out.append("\n")
        return "".join(out)

    def _is_delim(self, u: int) -> bool:
        return u != 0 and chr(u) in self.word_delimiters

    def sel_snap(self, x: int, y: int, direction: int) -> tuple[int, int]:
        """Return the position ``(x, y)`` moves to under the selection's snap mode."""
        rtop, rbot = 0, self.rows - 1
        if not self.alt:
            rtop += -self.histf + self.scr
            rbot += self.scr
        col = self.cols
        if self.sel.snap == SnapMode.WORD:
            maxlen = col - 1 if self.tline(y)[col - 2].mode & Attr.WRAP else col
            x = max(0, min(x, maxlen - 1))
            prev = self.tline(y)[x]
            prevdelim = self._is_delim(prev.u)
            while True:
                newx, newy = x + direction, y
                if not 0 <= newx <= maxlen - 1:
                    newy += direction
                    if not rtop <= newy <= rbot:
                        break
                    if not self.is_wrapped(self.tline(y if direction > 0 else newy)):
                        break
                    maxlen = col - 1 if self.tline(newy)[col - 2].mode & Attr.WRAP else col
                    newx = 0 if direction > 0 else maxlen - 1
                g = self.tline(newy)[newx]
                delim = self._is_delim(g.u)
                if not (g.mode & Attr.WDUMMY) and (
                        delim != prevdelim or (delim and g.u != prev.u)):
                    break
                x, y = newx, newy
                if not g.mode & Attr.WDUMMY:
                    prev, prevdelim = g, delim
        elif self.sel.snap == SnapMode.LINE:
            x = 0 if direction < 0 else col - 1
            if direction < 0:
                while y > rtop and self.is_wrapped(self.tline(y - 1)):
                    y -= 1
            elif direction > 0:
                while y < rbot and self.is_wrapped(self.tline(y)):
                    y += 1
        return x, y

    def sel_scroll(self, top: int, bot: int, n: int) -> None:
        top += self.scr
        bot += self.scr
        s = self.sel
        b_in = top <= s.nb.y <= bot
        e_in = top <= s.ne.y <= bot
        if b_in != e_in:
            self._sel_clear()
        elif b_in:
            s.move(n)
            if s.nb.y < top or s.ne.y > bot:
                self._sel_clear()

    # -- prompts -------------------------------------------------------

    def scroll_to_prompt(self, dy: int) -> None:
        """Scroll the view to the next prompt mark in direction ``dy``."""
        top = self.scr - self.histf
        bot = self.scr + self.rows - 1
        if not dy or self.alt:
            return
        y = dy
        while top <= y <= bot:
            if any(g.mode & Attr.FTCS_PROMPT for g in self.tline(y)[:self.cols]):
                break
            y += dy
        if dy < 0:
            self.kscroll_up(-y)
        else:
            self.kscroll_down(y)