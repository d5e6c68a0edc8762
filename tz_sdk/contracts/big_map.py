"""
Lazy big-map handle returned when decoding storage.

Building one performs no I/O; values are fetched per key through the
provider when `get` is called.
"""

from __future__ import annotations

from typing import Any

from .interface import ContractProvider, Schema


class BigMapAbstraction:
    def __init__(self, big_map_id: int, schema: Schema, provider: ContractProvider) -> None:
        self.id = int(big_map_id)
        self.schema = schema
        self._provider = provider

    def get(self, key: Any) -> Any:
        """Decoded value stored under `key`."""
        return self._provider.get_big_map_key_by_id(self.id, key, self.schema)

    def __str__(self) -> str:
        return str(self.id)

    def __repr__(self) -> str:
        return f"BigMapAbstraction(id={self.id})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BigMapAbstraction):
            return NotImplemented
        return self.id == other.id and self._provider is other._provider

    def __hash__(self) -> int:
        return hash((BigMapAbstraction, self.id))


__all__ = ["BigMapAbstraction"]
