"""
Shared in-memory fakes for the chain query, the Michelson encoder and the
contract provider.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

import pytest

from tz_sdk.contracts.interface import TransferParams
from tz_sdk.errors import RpcError

ALICE = "tz1Ke2h7sDdakHJQh8WX4Z372du1KChsksyU"
BOB = "tz1burnburnburnburnburnburnburjAYjjX"
TOKEN = "KT1TokenTokenTokenTokenTokenTokwnN2J"


class FakeChain:
    """Counter source; records every fetch."""

    def __init__(self, counters: Optional[Mapping[str, int]] = None, failing: Iterable[str] = ()) -> None:
        self.counters = dict(counters or {})
        self.failing = set(failing)
        self.calls: List[str] = []

    def get_account_counter(self, address: str) -> int:
        self.calls.append(address)
        if address in self.failing:
            raise RpcError(path=address, message="network error")
        return self.counters.get(address, 0)


def describe(type_expr: Any) -> Any:
    """Tiny stand-in for schema extraction: annotated pairs become records."""
    if isinstance(type_expr, Mapping) and type_expr.get("prim") == "pair":
        out: Dict[str, Any] = {}
        for i, arg in enumerate(type_expr.get("args", [])):
            annots = arg.get("annots") or [f"%{i}"]
            out[annots[0].lstrip("%")] = arg["prim"]
        return out
    if isinstance(type_expr, Mapping):
        return type_expr.get("prim")
    return type_expr


class FakeParameterSchema:
    def __init__(self, description: Any, multiple: bool = False, fail: Optional[Exception] = None) -> None:
        self.description = description
        self.multiple = multiple
        self.fail = fail
        self.encoded: List[tuple] = []

    @property
    def is_multiple_entrypoint(self) -> bool:
        return self.multiple

    def extract_schema(self) -> Any:
        return self.description

    def encode(self, *args: Any) -> Any:
        if self.fail is not None:
            raise self.fail
        self.encoded.append(args)
        return {"encoded": list(args)}


class FakeSchema:
    def __init__(self, type_expr: Any = None) -> None:
        self.type_expr = type_expr

    def extract_schema(self) -> Any:
        return describe(self.type_expr)

    def execute(self, value: Any, semantics: Optional[Mapping[str, Any]] = None) -> Any:
        if semantics and isinstance(self.type_expr, Mapping) and self.type_expr.get("prim") == "big_map":
            return semantics["big_map"](value, self.type_expr)
        return value

    def execute_on_big_map_value(self, value: Any, semantics: Optional[Mapping[str, Any]] = None) -> Any:
        return {"decoded": value}

    def encode_big_map_key(self, key: Any) -> Dict[str, Any]:
        return {"key": {"string": key}, "type": {"prim": "string"}}


class FakeSchemaFactory:
    def __init__(self, parameter: FakeParameterSchema, storage: Optional[FakeSchema] = None) -> None:
        self.parameter = parameter
        self.storage = storage or FakeSchema({"prim": "nat"})
        self.parameter_schemas_built: List[Any] = []
        self.schemas_built: List[Any] = []

    def storage_schema(self, script: Mapping[str, Any]) -> FakeSchema:
        return self.storage

    def parameter_schema(self, script: Mapping[str, Any]) -> FakeParameterSchema:
        return self.parameter

    def parameter_schema_for(self, type_expr: Any) -> FakeParameterSchema:
        self.parameter_schemas_built.append(type_expr)
        return FakeParameterSchema(describe(type_expr))

    def schema_for(self, type_expr: Any) -> FakeSchema:
        self.schemas_built.append(type_expr)
        return FakeSchema(type_expr)


class RecordingProvider:
    """ContractProvider that records calls instead of talking to a node."""

    def __init__(self, result: Any = "opHash", fail: Optional[Exception] = None) -> None:
        self.result = result
        self.fail = fail
        self.transfers: List[TransferParams] = []
        self.calls: List[tuple] = []

    def transfer(self, params: TransferParams) -> Any:
        if self.fail is not None:
            raise self.fail
        self.transfers.append(params)
        return self.result

    def get_storage(self, address: str, schema: Any) -> Any:
        self.calls.append(("get_storage", address, schema))
        return {"storage": address}

    def get_big_map_key(self, address: str, key: Any, schema: Any) -> Any:
        self.calls.append(("get_big_map_key", address, key, schema))
        return {"value": key}

    def get_big_map_key_by_id(self, big_map_id: int, key: Any, schema: Any) -> Any:
        self.calls.append(("get_big_map_key_by_id", big_map_id, key, schema))
        return {"value": key, "id": big_map_id}


def pair(**fields: str) -> Dict[str, Any]:
    return {"prim": "pair", "args": [{"prim": t, "annots": [f"%{n}"]} for n, t in fields.items()]}


SCRIPT = {"code": [{"prim": "parameter"}, {"prim": "storage"}, {"prim": "code"}], "storage": {"int": "0"}}


@pytest.fixture
def provider() -> RecordingProvider:
    return RecordingProvider()


@pytest.fixture
def token_entrypoints() -> Dict[str, Any]:
    return {
        "entrypoints": {
            "transfer": pair(to="address", amount="nat"),
            "approve": pair(spender="address", amount="nat"),
        }
    }
