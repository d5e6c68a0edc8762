"""
Collaborator protocols and context objects shared by the preparers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Protocol, Sequence


class ChainAccountQuery(Protocol):
    """Reads account state from the node. `RpcClient` satisfies it."""

    def get_account_counter(self, address: str) -> int: ...


@dataclass(frozen=True)
class PreparerContext:
    """
    What a preparer needs to know about the batch: the account that signs
    every manager operation in it, and where to read chain state from.
    """

    source: str
    chain: ChainAccountQuery


class Preparer(Protocol):
    def prepare(self, ops: Sequence[Dict[str, Any]], context: PreparerContext) -> List[Dict[str, Any]]: ...


__all__ = ["ChainAccountQuery", "PreparerContext", "Preparer"]
