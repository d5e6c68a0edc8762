"""
tz_sdk.operations.build
=======================

Builders for unprepared operation requests (reveal / transaction /
origination / delegation / activation).

The builders return request dicts without a `counter`; counters are assigned
by `tz_sdk.preparer.CounterPreparer` once the whole batch is known.

Examples
--------
    from tz_sdk.operations.build import reveal, transaction

    batch = [
        reveal(source="tz1...", public_key="edpk...", fee=1420, gas_limit=10600),
        transaction(source="tz1...", destination="KT1...", amount=1_000_000,
                    fee=1420, gas_limit=10600, storage_limit=300),
    ]
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from .types import (
    ActivationDict,
    DelegationDict,
    OpKind,
    OriginationDict,
    RevealDict,
    TransactionDict,
)


def _require_non_negative(name: str, value: int) -> str:
    if int(value) < 0:
        raise ValueError(f"{name} must be non-negative")
    return str(int(value))


def _require_address(name: str, value: Optional[str]) -> str:
    if not isinstance(value, str) or len(value) == 0:
        raise ValueError(f"{name} must be a non-empty address string")
    return value


def _manager_fields(source: str, fee: int, gas_limit: int, storage_limit: int) -> Dict[str, str]:
    return {
        "source": _require_address("source", source),
        "fee": _require_non_negative("fee", fee),
        "gas_limit": _require_non_negative("gas_limit", gas_limit),
        "storage_limit": _require_non_negative("storage_limit", storage_limit),
    }


def reveal(
    *,
    source: str,
    public_key: str,
    fee: int,
    gas_limit: int,
    storage_limit: int = 0,
) -> RevealDict:
    if not public_key:
        raise ValueError("public_key must be non-empty")
    op: RevealDict = {"kind": OpKind.REVEAL.value, **_manager_fields(source, fee, gas_limit, storage_limit)}  # type: ignore[typeddict-item]
    op["public_key"] = public_key
    return op


def transaction(
    *,
    source: str,
    destination: str,
    amount: int,
    fee: int,
    gas_limit: int,
    storage_limit: int,
    parameters: Optional[Mapping[str, Any]] = None,
) -> TransactionDict:
    """
    Transaction request. `parameters` is the already-encoded call parameter
    ({"entrypoint": ..., "value": ...}); omit it for plain transfers.
    """
    op: TransactionDict = {"kind": OpKind.TRANSACTION.value, **_manager_fields(source, fee, gas_limit, storage_limit)}  # type: ignore[typeddict-item]
    op["amount"] = _require_non_negative("amount", amount)
    op["destination"] = _require_address("destination", destination)
    if parameters is not None:
        if "entrypoint" not in parameters or "value" not in parameters:
            raise ValueError("parameters must carry 'entrypoint' and 'value'")
        op["parameters"] = {"entrypoint": parameters["entrypoint"], "value": parameters["value"]}
    return op


def origination(
    *,
    source: str,
    script: Mapping[str, Any],
    balance: int,
    fee: int,
    gas_limit: int,
    storage_limit: int,
    delegate: Optional[str] = None,
) -> OriginationDict:
    if "code" not in script or "storage" not in script:
        raise ValueError("script must carry 'code' and 'storage'")
    op: OriginationDict = {"kind": OpKind.ORIGINATION.value, **_manager_fields(source, fee, gas_limit, storage_limit)}  # type: ignore[typeddict-item]
    op["balance"] = _require_non_negative("balance", balance)
    op["script"] = dict(script)
    if delegate is not None:
        op["delegate"] = _require_address("delegate", delegate)
    return op


def delegation(
    *,
    source: str,
    fee: int,
    gas_limit: int,
    storage_limit: int = 0,
    delegate: Optional[str] = None,
) -> DelegationDict:
    """Set (or, with `delegate=None`, withdraw) the delegate of `source`."""
    op: DelegationDict = {"kind": OpKind.DELEGATION.value, **_manager_fields(source, fee, gas_limit, storage_limit)}  # type: ignore[typeddict-item]
    if delegate is not None:
        op["delegate"] = _require_address("delegate", delegate)
    return op


def activation(*, pkh: str, secret: str) -> ActivationDict:
    """Fundraiser account activation. Carries no counter."""
    if not secret:
        raise ValueError("secret must be non-empty")
    return {"kind": OpKind.ACTIVATION.value, "pkh": _require_address("pkh", pkh), "secret": secret}


__all__ = ["reveal", "transaction", "origination", "delegation", "activation"]
