"""
tz_sdk.preparer
===============

Operation preparers. `CounterPreparer` assigns per-account counters to a
batch before it is handed to forging/signing.

    from tz_sdk.preparer import CounterPreparer, PreparerContext

    prepared = CounterPreparer().prepare(batch, PreparerContext(source="tz1...", chain=rpc))
"""

from .counter import Counter, CounterPreparer, CounterProvider, CounterValue
from .types import ChainAccountQuery, Preparer, PreparerContext

__all__ = [
    "Counter",
    "CounterValue",
    "CounterProvider",
    "CounterPreparer",
    "ChainAccountQuery",
    "Preparer",
    "PreparerContext",
]
