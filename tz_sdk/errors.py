"""
Typed error classes for tz-sdk.

These are raised by the RPC transport, the operation preparers and the
contract abstraction so callers can catch specific failure modes while still
being able to catch the base `TzSdkError`.

Hierarchy:

    TzSdkError (base)
    ├── RpcError                node unreachable or returned an HTTP error
    ├── PreparationError        batch preparation aborted
    ├── InvalidArgumentsError   wrong number of arguments for an entrypoint
    ├── UnknownEntrypointError  method name not exposed by the contract
    ├── EncodeError             parameter encoder rejected the arguments
    └── ConfigError             invalid configuration value or file

Errors raised by external collaborators (submission layer, signer) are never
wrapped; they reach the caller unchanged.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

__all__ = [
    "TzSdkError",
    "RpcError",
    "PreparationError",
    "InvalidArgumentsError",
    "UnknownEntrypointError",
    "EncodeError",
    "ConfigError",
]


class TzSdkError(Exception):
    """Base class for all SDK errors."""


@dataclass(eq=False)
class RpcError(TzSdkError):
    """Raised when a node RPC request fails (transport error or HTTP error status)."""

    path: Optional[str]
    message: str
    status: Optional[int] = None
    data: Optional[Any] = None

    def __str__(self) -> str:
        parts = [f"RPC[{self.path or '-'}] {self.message}"]
        if self.status is not None:
            parts.append(f"http={self.status}")
        if self.data is not None:
            s = str(self.data)
            if len(s) > 256:
                s = s[:253] + "..."
            parts.append(f"data={s}")
        return " ".join(parts)

    @property
    def is_not_found(self) -> bool:
        return self.status == 404


@dataclass(eq=False)
class PreparationError(TzSdkError):
    """
    Raised when a batch cannot be prepared. The batch is discarded as a whole;
    `index` and `kind` identify the request that was being processed and the
    underlying failure is available as `__cause__`.
    """

    message: str
    index: int
    kind: Optional[str] = None
    source: Optional[str] = None

    def __str__(self) -> str:
        where = [f"index={self.index}"]
        if self.kind:
            where.append(f"kind={self.kind}")
        if self.source:
            where.append(f"source={self.source}")
        return f"PreparationError [{', '.join(where)}]: {self.message}"


@dataclass(eq=False)
class InvalidArgumentsError(TzSdkError):
    """
    Raised when an entrypoint is invoked with a number of arguments that does
    not match the arity implied by its parameter schema.
    """

    entrypoint: str
    received: int
    expected: int
    expected_keys: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return (
            f"{self.entrypoint} Received {self.received} arguments while expecting "
            f"{self.expected} ({json.dumps(self.expected_keys)})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entrypoint": self.entrypoint,
            "received": self.received,
            "expected": self.expected,
            "expected_keys": list(self.expected_keys),
        }


@dataclass(eq=False)
class UnknownEntrypointError(TzSdkError, AttributeError):
    """Raised when a method name is not exposed by the contract."""

    entrypoint: str
    available: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"unknown entrypoint {self.entrypoint!r} (available: {', '.join(self.available) or '-'})"


@dataclass(eq=False)
class EncodeError(TzSdkError):
    """Raised when the parameter encoder rejects the call arguments."""

    message: str
    entrypoint: Optional[str] = None

    def __str__(self) -> str:
        where = f" [entrypoint={self.entrypoint}]" if self.entrypoint else ""
        return f"EncodeError{where}: {self.message}"


@dataclass(eq=False)
class ConfigError(TzSdkError):
    """Raised for invalid configuration values or unreadable config files."""

    message: str
    key: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.key}: {self.message}" if self.key else self.message
