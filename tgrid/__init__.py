"""Terminal grid model with scrollback, reflow, keyboard selection, URL detection and helpers."""

__version__ = "0.9.2"

__all__ = [
    "boxdraw",
    "colors",
    "farbfeld",
    "glyph",
    "kbdselect",
    "osc7",
    "screen",
    "sync",
    "urls",
    "xresources",
]