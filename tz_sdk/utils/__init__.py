"""
Utility helpers for the SDK.

Re-exports:
- b58: base58check codec
- hash: BLAKE2b and script-expression hashing
"""

from .b58 import B58Error, b58check_decode, b58check_encode
from .hash import blake2b_256, script_expr_hash

__all__ = [
    # b58
    "B58Error",
    "b58check_encode",
    "b58check_decode",
    # hash
    "blake2b_256",
    "script_expr_hash",
]
