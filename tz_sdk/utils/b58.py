"""
Base58Check codec plus the prefixed-identifier helpers used by the node.

This module provides a tiny self-contained implementation so the SDK doesn't
depend on external base58 libraries. Identifiers are `prefix || payload`
encoded with a 4-byte double-SHA256 checksum.

Typical usage
-------------
>>> s = b58check_encode(bytes(32), prefix=PREFIX_EXPR)
>>> s.startswith("expr")
True
>>> b58check_decode(s, prefix=PREFIX_EXPR) == bytes(32)
True
"""

from __future__ import annotations

import hashlib
from typing import Optional

__all__ = [
    "b58encode",
    "b58decode",
    "b58check_encode",
    "b58check_decode",
    "B58Error",
    "PREFIX_EXPR",
]

ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
ALPHABET_REV = {c: i for i, c in enumerate(ALPHABET)}

# Script expression hash ("expr...")
PREFIX_EXPR = bytes((13, 44, 64, 27))


class B58Error(ValueError):
    pass


def b58encode(data: bytes) -> str:
    n = int.from_bytes(data, "big")
    out = []
    while n > 0:
        n, rem = divmod(n, 58)
        out.append(ALPHABET[rem])
    # Leading zero bytes map to leading '1's
    pad = len(data) - len(data.lstrip(b"\x00"))
    return "1" * pad + "".join(reversed(out))


def b58decode(s: str) -> bytes:
    n = 0
    for c in s:
        try:
            n = n * 58 + ALPHABET_REV[c]
        except KeyError:
            raise B58Error(f"invalid base58 character {c!r}") from None
    body = n.to_bytes((n.bit_length() + 7) // 8, "big") if n else b""
    pad = len(s) - len(s.lstrip("1"))
    return b"\x00" * pad + body


def _checksum(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()[:4]


def b58check_encode(payload: bytes, *, prefix: bytes = b"") -> str:
    data = bytes(prefix) + bytes(payload)
    return b58encode(data + _checksum(data))


def b58check_decode(s: str, *, prefix: Optional[bytes] = None) -> bytes:
    """Decode and verify; strips `prefix` when given (and checks it matches)."""
    raw = b58decode(s)
    if len(raw) < 4:
        raise B58Error("input too short")
    data, chk = raw[:-4], raw[-4:]
    if _checksum(data) != chk:
        raise B58Error("checksum mismatch")
    if prefix is not None:
        if not data.startswith(prefix):
            raise B58Error("unexpected prefix")
        data = data[len(prefix):]
    return data
