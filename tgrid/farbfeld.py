"""Reading farbfeld images for window backgrounds and icons."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from os import PathLike
from typing import BinaryIO

MAGIC = b"farbfeld"


class FarbfeldError(ValueError):
    """Raised when a farbfeld image cannot be read."""


@dataclass
class FarbfeldImage:
    """An image of 16-bit (red, green, blue, alpha) pixels in row order."""

    width: int
    height: int
    pixels: list[tuple[int, int, int, int]] = field(default_factory=list)

    def _argb(self) -> list[int]:
        return [
            (a >> 8) << 24 | (r >> 8) << 16 | (g >> 8) << 8 | (b >> 8)
            for r, g, b, a in self.pixels
        ]

    def to_xrgb64(self) -> list[int]:
        """Pixels as 8-bit ARGB words, as placed in a 64-bit pixel slot."""
        return self._argb()

    def to_net_wm_icon(self) -> list[int]:
        """Width, height and 8-bit ARGB pixels in _NET_WM_ICON layout."""
        return [self.width, self.height, *self._argb()]


def read_farbfeld(stream: BinaryIO) -> FarbfeldImage:
    """Read a farbfeld image from a binary stream."""
    header = stream.read(16)
    if len(header) != 16:
        raise FarbfeldError("Unexpected end of file reading header")
    if header[:8] != MAGIC:
        raise FarbfeldError("Invalid magic value")
    width, height = struct.unpack(">II", header[8:])
    size = width * height
    data = stream.read(size * 8)
    if len(data) != size * 8:
        raise FarbfeldError("Unexpected end of file reading data")
    pixels = list(struct.iter_unpack(">HHHH", data))
    return FarbfeldImage(width, height, pixels)


def load_farbfeld(path: str | PathLike[str]) -> FarbfeldImage:
    """Load a farbfeld image from a file."""
    try:
        with open(path, "rb") as f:
            return read_farbfeld(f)
    except OSError as exc:
        raise FarbfeldError(f"could not load image: {exc}") from exc