"""
tz_sdk.operations
=================

Operation request shapes and builders.

Submodules
----------
- types : `OpKind`, `COUNTER_KINDS` and the request TypedDicts.
- build : builders for reveal / transaction / origination / delegation / activation.
"""

from . import build
from .types import COUNTER_KINDS, OpKind, has_counter, op_kind

__all__ = ["build", "OpKind", "COUNTER_KINDS", "has_counter", "op_kind"]
