"""Network helpers for CLI commands."""

from __future__ import annotations

import errno
import socket

_UNUSABLE_ADDRESS = {errno.EADDRNOTAVAIL, errno.EAFNOSUPPORT}


def is_port_in_use(host: str, port: int) -> bool:
    """Return True if any address `host` resolves to already has `port` bound."""
    try:
        infos = socket.getaddrinfo(host or None, port, type=socket.SOCK_STREAM, flags=socket.AI_PASSIVE)
    except socket.gaierror:
        return False
    for family, socktype, proto, _name, addr in infos:
        try:
            with socket.socket(family, socktype, proto) as s:
                s.bind(addr)
        except OSError as e:
            if e.errno == errno.EADDRINUSE:
                return True
            if e.errno not in _UNUSABLE_ADDRESS:
                raise
    return False
