"""Loading settings from an X resource database string."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable

_NAME_MAX = 255
_KEY_PART = re.compile(r"([.*]*)([^.*]+)")
_INT = re.compile(r"\s*([+-]?)(\d+)")
_FLOAT = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


class ResourceType(IntEnum):
    STRING = 0
    INTEGER = 1
    FLOAT = 2


@dataclass(frozen=True)
class ResourcePref:
    """A setting to read: its resource name and how to convert it."""

    name: str
    type: ResourceType


def _logical_lines(text: str) -> list[str]:
    lines: list[str] = []
    pending = ""
    for raw in text.split("\n"):
        trailing = len(raw) - len(raw.rstrip("\\"))
        if trailing % 2:
            pending += raw[:-1]
            continue
        lines.append(pending + raw)
        pending = ""
    if pending:
        lines.append(pending)
    return lines


def _unescape(value: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(value):
        ch = value[i]
        if ch != "\\" or i + 1 >= len(value):
            out.append(ch)
            i += 1
            continue
        nxt = value[i + 1]
        octal = value[i + 1:i + 4]
        if nxt == "n":
            out.append("\n")
            i += 2
        elif nxt in "\\ \t":
            out.append(nxt)
            i += 2
        elif len(octal) == 3 and all(c in "01234567" for c in octal):
            out.append(chr(int(octal, 8)))
            i += 4
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def _parse_key(key: str) -> list[tuple[bool, str]]:
    return [("*" in binding, comp) for binding, comp in _KEY_PART.findall(key)]


def _normalize(key: str) -> str:
    return "".join(("*" if loose else ".") + comp for loose, comp in _parse_key(key))


def parse_resources(text: str) -> dict[str, str]:
    """Parse resource lines (``name: value``) into a database."""
    db: dict[str, str] = {}
    for raw in _logical_lines(text):
        line = raw.lstrip(" \t")
        if not line or line[0] in "!#":
            continue
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key = _normalize(key.strip())
        if key:
            db[key] = _unescape(value.lstrip(" \t"))
    return db


def _match(spec: list[tuple[bool, str]], names: list[str],
           classes: list[str]) -> tuple | None:
    best: tuple | None = None

    def walk(si: int, qi: int, score: tuple) -> None:
        nonlocal best
        if si == len(spec):
            if qi == len(names) and (best is None or score > best):
                best = score
            return
        if qi == len(names):
            return
        loose, comp = spec[si]
        if comp == names[qi]:
            kind = 3
        elif comp == classes[qi]:
            kind = 2
        elif comp == "?":
            kind = 1
        else:
            kind = 0
        if kind:
            walk(si + 1, qi + 1, score + ((kind, 0 if loose else 1),))
        if loose:
            walk(si, qi + 1, score + ((0, 0),))

    walk(0, 0, ())
    return best


def _strtoul(text: str) -> int:
    m = _INT.match(text)
    if not m:
        return 0
    value = int(m.group(2))
    return -value if m.group(1) == "-" else value


def _strtof(text: str) -> float:
    m = _FLOAT.match(text)
    return float(m.group(1)) if m else 0.0


def resource_load(db: dict[str, str], name: str, rtype: ResourceType,
                  name_prefix: str | None = None,
                  class_prefix: str | None = None) -> str | int | float | None:
    """Look up ``name`` under the program's name and class; None if unset."""
    fullname = f"{name_prefix or 'st'}.{name}"[:_NAME_MAX]
    fullclass = f"{class_prefix or 'St'}.{name}"[:_NAME_MAX]
    names, classes = fullname.split("."), fullclass.split(".")
    if len(names) != len(classes):
        return None
    best_score: tuple | None = None
    value: str | None = None
    for key, candidate in db.items():
        score = _match(_parse_key(key), names, classes)
        if score is not None and (best_score is None or score > best_score):
            best_score, value = score, candidate
    if value is None:
        return None
    if rtype == ResourceType.INTEGER:
        return _strtoul(value)
    if rtype == ResourceType.FLOAT:
        return _strtof(value)
    return value


def config_init(text: str | None,
                prefs: Iterable[ResourcePref]) -> dict[str, str | int | float]:
    """Return the values the resource string sets for ``prefs``."""
    if text is None:
        return {}
    db = parse_resources(text)
    values: dict[str, str | int | float] = {}
    for pref in prefs:
        value = resource_load(db, pref.name, pref.type)
        if value is not None:
            values[pref.name] = value
    return values