"""
Collaborator protocols for the contract abstraction.

The Michelson encoder (schemas) and the operation submission layer are
external services; the SDK only depends on the surface described here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Protocol

# Encoder semantics: Michelson type name -> hook(value, type_code) -> decoded value
Semantic = Mapping[str, Callable[[Any, Any], Any]]


class ParameterSchema(Protocol):
    """Parameter side of the encoder: arity description plus encode."""

    @property
    def is_multiple_entrypoint(self) -> bool: ...

    def extract_schema(self) -> Any: ...

    def encode(self, *args: Any) -> Any: ...


class Schema(Protocol):
    """Storage side of the encoder."""

    def extract_schema(self) -> Any: ...

    def execute(self, value: Any, semantics: Optional[Semantic] = None) -> Any: ...

    def execute_on_big_map_value(self, value: Any, semantics: Optional[Semantic] = None) -> Any: ...

    def encode_big_map_key(self, key: Any) -> Dict[str, Any]:
        """Return {"key": <michelson value>, "type": <michelson type>}."""
        ...


class SchemaFactory(Protocol):
    """Builds schemas from a contract script or a bare Michelson type."""

    def storage_schema(self, script: Mapping[str, Any]) -> Schema: ...

    def parameter_schema(self, script: Mapping[str, Any]) -> ParameterSchema: ...

    def parameter_schema_for(self, type_expr: Any) -> ParameterSchema: ...

    def schema_for(self, type_expr: Any) -> Schema: ...


@dataclass(frozen=True)
class TransferParams:
    """
    A transfer request as produced by contract methods.

    When `raw_param` is set, `parameter` is already encoded and must be put on
    the operation as-is (no further encoding by the submission layer).
    """

    to: str
    amount: int = 0
    fee: Optional[int] = None
    gas_limit: Optional[int] = None
    storage_limit: Optional[int] = None
    parameter: Any = None
    raw_param: bool = False
    source: Optional[str] = None


class ContractProvider(Protocol):
    """Submission and storage-query capability used by `Contract`."""

    def transfer(self, params: TransferParams) -> Any: ...

    def get_storage(self, address: str, schema: Schema) -> Any: ...

    def get_big_map_key(self, address: str, key: Any, schema: Schema) -> Any: ...

    def get_big_map_key_by_id(self, big_map_id: int, key: Any, schema: Schema) -> Any: ...


__all__ = [
    "Semantic",
    "ParameterSchema",
    "Schema",
    "SchemaFactory",
    "TransferParams",
    "ContractProvider",
]
