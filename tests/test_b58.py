from __future__ import annotations

import pytest

from tz_sdk.utils.b58 import PREFIX_EXPR, B58Error, b58check_decode, b58check_encode, b58decode, b58encode
from tz_sdk.utils.hash import blake2b_256, script_expr_hash

TZ1_PREFIX = bytes((6, 161, 159))


def test_plain_vectors():
    assert b58encode(b"hello world") == "StV1DL6CwTryKyV"
    assert b58decode("StV1DL6CwTryKyV") == b"hello world"
    assert b58encode(b"\x00\x00\x01") == "112"
    assert b58decode("112") == b"\x00\x00\x01"
    assert b58encode(b"") == ""


def test_null_implicit_account():
    assert b58check_encode(bytes(20), prefix=TZ1_PREFIX) == "tz1Ke2h7sDdakHJQh8WX4Z372du1KChsksyU"
    assert b58check_decode("tz1Ke2h7sDdakHJQh8WX4Z372du1KChsksyU", prefix=TZ1_PREFIX) == bytes(20)


def test_checksum_and_prefix_are_verified():
    s = b58check_encode(b"\x01" * 32, prefix=PREFIX_EXPR)
    corrupted = s[:-1] + ("1" if s[-1] != "1" else "2")
    with pytest.raises(B58Error):
        b58check_decode(corrupted)
    with pytest.raises(B58Error):
        b58check_decode(s, prefix=TZ1_PREFIX)
    with pytest.raises(B58Error):
        b58decode("0OIl")


def test_script_expr_hash_shape():
    packed = bytes.fromhex("050100000005616c696365")
    expr = script_expr_hash(packed)
    assert expr.startswith("expr")
    assert len(expr) == 54
    assert b58check_decode(expr, prefix=PREFIX_EXPR) == blake2b_256(packed)
