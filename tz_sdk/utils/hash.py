"""
Hash helpers (BLAKE2b) used for node identifiers.
"""

from __future__ import annotations

import hashlib
from typing import Union

from .b58 import PREFIX_EXPR, b58check_encode

BytesLike = Union[bytes, bytearray, memoryview]


def blake2b_256(data: BytesLike) -> bytes:
    """32-byte BLAKE2b digest."""
    return hashlib.blake2b(bytes(data), digest_size=32).digest()


def script_expr_hash(packed: BytesLike) -> str:
    """
    Script expression hash ("expr...") of a packed Michelson value: the key
    under which the node addresses big-map values.
    """
    return b58check_encode(blake2b_256(packed), prefix=PREFIX_EXPR)


__all__ = ["blake2b_256", "script_expr_hash"]
