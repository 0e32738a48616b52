"""Colour adjustments: window opacity and inverted colours."""

from __future__ import annotations


def clamp(value: float, lower: float, upper: float) -> float:
    """Limit ``value`` to the range ``[lower, upper]``."""
    if value < lower:
        return lower
    if value > upper:
        return upper
    return value


def change_alpha(alpha: float, delta: float) -> float:
    """Return the opacity after a step of ``delta``, kept within 0..1."""
    if (alpha > 0 and delta < 0) or (alpha < 1 and delta > 0):
        alpha += delta
    return clamp(alpha, 0.0, 1.0)


def inverted_color(color: tuple[int, int, int, int]) -> tuple[int, int, int, int]:
    """Invert the 16-bit red, green and blue channels, keeping alpha."""
    red, green, blue, alpha = color
    return (~red & 0xFFFF, ~green & 0xFFFF, ~blue & 0xFFFF, alpha)