"""
Operation request shapes.

Requests are plain dicts in the node's JSON naming (`gas_limit`,
`storage_limit`, ...) so they can be handed to forging/signing services as-is.
The `TypedDict`s below document the fields; numeric ledger values (fees,
counters, amounts, limits) are decimal strings.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, TypedDict


class OpKind(str, Enum):
    ACTIVATION = "activate_account"
    REVEAL = "reveal"
    TRANSACTION = "transaction"
    ORIGINATION = "origination"
    DELEGATION = "delegation"


# Kinds that consume a slot of the source account's counter.
COUNTER_KINDS = frozenset(
    {OpKind.REVEAL.value, OpKind.TRANSACTION.value, OpKind.ORIGINATION.value, OpKind.DELEGATION.value}
)


class ParametersDict(TypedDict):
    entrypoint: str
    value: Any


class ActivationDict(TypedDict):
    kind: str
    pkh: str
    secret: str


class ManagerOpDict(TypedDict, total=False):
    kind: str
    source: str
    fee: str
    gas_limit: str
    storage_limit: str
    counter: str


class RevealDict(ManagerOpDict, total=False):
    public_key: str


class TransactionDict(ManagerOpDict, total=False):
    amount: str
    destination: str
    parameters: ParametersDict


class OriginationDict(ManagerOpDict, total=False):
    balance: str
    script: Dict[str, Any]
    delegate: str


class DelegationDict(ManagerOpDict, total=False):
    delegate: str


OperationDict = Dict[str, Any]
Batch = List[OperationDict]


def op_kind(op: Mapping[str, Any]) -> Optional[str]:
    kind = op.get("kind")
    return kind.value if isinstance(kind, OpKind) else kind


def has_counter(op: Mapping[str, Any]) -> bool:
    """True when `op` is of a kind that must carry a counter."""
    return op_kind(op) in COUNTER_KINDS


__all__ = [
    "OpKind",
    "COUNTER_KINDS",
    "ParametersDict",
    "ActivationDict",
    "ManagerOpDict",
    "RevealDict",
    "TransactionDict",
    "OriginationDict",
    "DelegationDict",
    "OperationDict",
    "Batch",
    "op_kind",
    "has_counter",
]
