"""
Encoder semantics for contract storage.

The Michelson encoder calls these hooks while decoding storage; the SDK
overrides ``big_map`` so big maps decode to lazy `BigMapAbstraction` handles
instead of being fetched eagerly.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional

from .big_map import BigMapAbstraction
from .interface import ContractProvider, SchemaFactory


def _big_map_id(value: Any) -> Optional[int]:
    if not isinstance(value, Mapping):
        return None
    try:
        return int(value.get("int"))
    except (TypeError, ValueError):
        return None


def smart_contract_abstraction_semantic(
    provider: ContractProvider, schema_factory: SchemaFactory
) -> Dict[str, Callable[[Any, Any], Any]]:
    def big_map(value: Any, type_code: Any) -> Any:
        big_map_id = _big_map_id(value)
        if big_map_id is None:
            # No usable big map id (e.g. a literal map in an origination script)
            return {}
        return BigMapAbstraction(big_map_id, schema_factory.schema_for(type_code), provider)

    return {"big_map": big_map}


__all__ = ["smart_contract_abstraction_semantic"]
