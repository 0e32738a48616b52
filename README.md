# tgrid

`tgrid` is a pure-Python model of a terminal screen and the features built
around it. It holds the cell grid and the scrollback, and it handles
scrolling, reflow, selection and search. It draws nothing itself. A renderer
and an input layer call into it.

## Modules

- `tgrid.glyph` provides the `Glyph` cell (code point, `Attr` flags, fore- and
  background colour), `Glyph.copy` and `blank_line(cols, fg, bg)`.
- `tgrid.screen` provides `Screen`, which has a main and an alternate screen
  and a ring buffer of history lines.
  - Line access: `tline`, `tline_abs`, `line_len`, `is_wrapped`.
  - Editing: `clear_region`, `delete_char`, `insert_blank`.
  - Scrolling: `scroll_up` and `scroll_down` move the region. `kscroll_up` and
    `kscroll_down` move the view into and out of history.
  - Resizing: `resize`. When the width changes, `reflow` rewraps the history
    and the screen.
  - Screen switching: `swap_screen`, `load_alt_screen`, `load_def_screen`.
  - Text: `get_line`, `get_selection`.
  - Selection: `region_selected`, `selected`, `sel_snap` (`SnapMode.WORD` or
    `SnapMode.LINE`), `sel_scroll`, and the `Selection` object with `move`,
    `clear` and `normalize`.
  - `scroll_to_prompt(dy)` moves the view to the next cell marked
    `Attr.FTCS_PROMPT`.
- `tgrid.kbdselect` provides `KeyboardSelect`, a vi-like keyboard mode over a
  `Screen`.
  - Keys are X keysym names such as `"v"`, `"Escape"` or `"KP_5"`. You pass
    them to `handle_key(key, text, force_quit)`, which returns `True` when
    the mode is left.
  - It covers motions, counts, word jumps (`w`/`b`/`e`), find and till
    (`f`/`t`/`F`/`T`, repeated with `;` and `,`), character and line selection
    (`v`/`V`), and incremental search (`/`, `?`, `n`, `N`).
  - Copied text ends up in `KeyboardSelect.clipboard`.
  - `status_bar(y)` returns the cells to overlay for the mode indicator and
    the search prompt.
- `tgrid.boxdraw` turns box-drawing, block, shade and braille code points into
  filled rectangles (`BoxRect`).
  - `is_boxdraw` and `boxdraw_index` pick out a glyph and its shape data.
  - `draw_box`, `draw_box_lines` and `draw_boxes` produce the rectangles for
    one cell or a run of cells.
- `tgrid.urls` finds URLs in the grid.
  - `copy_url(screen)` selects the last `http://` or `https://` URL above the
    selection and returns its text.
  - `detect_url(screen, col, row)` returns the `UrlMatch` under a cell, and
    follows wrapped lines to do so.
  - `open_url_on_click` starts an opener program (`xdg-open` by default) on
    that URL.
- `tgrid.osc7` provides `parse_osc7_cwd(uri, hostname)`, which reads a
  `file://` working-directory report.
  - It returns `""` when the directory is to be reset.
  - It returns `None` when the report names another host.
  - It raises `Osc7Error` on a bad URI.
- `tgrid.farbfeld` reads farbfeld images with `read_farbfeld(stream)` and
  `load_farbfeld(path)`. Both return a `FarbfeldImage` and raise
  `FarbfeldError` on bad data. `to_xrgb64` and `to_net_wm_icon` convert the
  16-bit pixels to 8-bit ARGB words.
- `tgrid.colors` provides `clamp`, `change_alpha(alpha, delta)` and
  `inverted_color((r, g, b, a))`.
- `tgrid.sync` provides `SyncState`, a synchronized-update flag. Call `begin`
  and `end` to open and close it. `in_sync(timeout)` reports whether it is
  still open, and it closes on its own after `timeout` milliseconds.
- `tgrid.xresources` reads X resource database text.
  - `parse_resources(text)` parses the text.
  - `resource_load` looks up a name under the `st` name and `St` class
    prefixes, with wildcard matching.
  - `config_init(text, prefs)` returns the typed values, string, integer or
    float, for a list of `ResourcePref`.

## Example

```python
from tgrid.screen import Screen
from tgrid.boxdraw import boxdraw_index, draw_box

screen = Screen(80, 24)
screen.resize(40, 24)          # reflows wrapped lines to the new width
print(screen.get_line(0))

rects = draw_box(0, 0, 8, 16, fg=None, bg=None,
                 bd=boxdraw_index(0x253C, 0, braille=True, bold=False))
```

## What it does not do

`tgrid` is a library, and several parts of a terminal are left to the
program that uses it:

- It has no command to run.
- It opens no window and reads no pseudo-terminal.
- It does not parse escape sequences, so it does not fill the grid from
  program output.
- Apart from `open_url_on_click`, it starts no other programs. It does not
  pipe screen contents to a command, open copied text, ask for a code point,
  plumb a selection or open a new terminal window.

## Tests

```
pip install -e .[test]
pytest
```