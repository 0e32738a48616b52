"""Parsing of OSC 7 working-directory reports."""

from __future__ import annotations

import re
import socket

PATH_MAX = 4096

_PERCENT = re.compile(rb"%([0-9A-Fa-f]{2})")


class Osc7Error(ValueError):
    """Raised for an OSC 7 URI that cannot be used."""


def _local_hostname() -> str:
    try:
        return socket.gethostname()
    except OSError:
        return ""


def parse_osc7_cwd(uri: str, hostname: str | None = None) -> str | None:
    """Return the directory reported by a ``file://`` URI.

    An empty string means the directory is to be reset. ``None`` means the
    URI names another host and is to be ignored.
    """
    if not uri:
        return ""
    decoded = _PERCENT.sub(lambda m: bytes([int(m.group(1), 16)]),
                           uri.encode("utf-8", "surrogateescape"))
    if len(decoded) >= PATH_MAX:
        raise Osc7Error("uri is too long")
    if not decoded.startswith(b"file:"):
        raise Osc7Error(f"scheme is not supported: {uri!r}")
    if decoded[5:7] != b"//":
        raise Osc7Error(f"invalid uri: {uri!r}")
    auth = decoded[7:]
    slash = auth.find(b"/")
    if slash < 0:
        return ""
    authority, path = auth[:slash], auth[slash:]
    host = authority.split(b"@", 1)[1] if b"@" in authority else authority
    host = host.split(b":", 1)[0]
    if hostname is None:
        hostname = _local_hostname()
    this_host = hostname.encode("utf-8", "surrogateescape")
    if host and host != b"localhost" and host != this_host:
        return None
    return path.decode("utf-8", "surrogateescape")