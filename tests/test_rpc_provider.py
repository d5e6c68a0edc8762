from __future__ import annotations

import json
from typing import Any, Dict, List

import httpx
import pytest

from conftest import ALICE, BOB, SCRIPT, TOKEN, FakeParameterSchema, FakeSchema, FakeSchemaFactory
from tz_sdk.config import OperationDefaults
from tz_sdk.contracts import BigMapAbstraction, DispatchStyle, RpcContractProvider, TransferParams
from tz_sdk.errors import PreparationError
from tz_sdk.rpc.http import RpcClient
from tz_sdk.utils.hash import script_expr_hash

HEAD = "/chains/main/blocks/head"


class FakeInjector:
    def __init__(self, source: str = ALICE, fail: Exception | None = None) -> None:
        self._source = source
        self.fail = fail
        self.injected: List[List[Dict[str, Any]]] = []

    @property
    def source(self) -> str:
        return self._source

    def public_key(self) -> str:
        return "edpkTestKey"

    def inject(self, ops: List[Dict[str, Any]]) -> Any:
        if self.fail is not None:
            raise self.fail
        self.injected.append(ops)
        return "onHash"


class FakeNode:
    """Routes node RPC paths to canned responses; unknown paths answer 404."""

    def __init__(self, routes: Dict[str, Any]) -> None:
        self.routes = routes
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = f"{request.method} {request.url.path}"
        if key not in self.routes:
            return httpx.Response(404, json=[{"kind": "temporary", "id": "not_found"}])
        body = self.routes[key]
        if callable(body):
            return body(request)
        # Response(json=None) has an empty body; the node answers a literal null.
        return httpx.Response(200, content=json.dumps(body).encode())

    def paths(self) -> List[str]:
        return [r.url.path for r in self.requests]


def _provider(routes: Dict[str, Any], factory=None, injector=None, defaults=None):
    node = FakeNode(routes)
    rpc = RpcClient("http://node.test", transport=httpx.MockTransport(node), backoff_base=0.0, backoff_jitter=0.0)
    factory = factory or FakeSchemaFactory(FakeParameterSchema("nat"))
    injector = injector or FakeInjector()
    return RpcContractProvider(rpc, factory, injector, defaults), node, injector, factory


def test_transfer_reveals_unrevealed_source_and_stamps_counters():
    provider, node, injector, _ = _provider(
        {
            f"GET {HEAD}/context/contracts/{ALICE}/manager_key": None,
            f"GET {HEAD}/context/contracts/{ALICE}": {"balance": "10", "counter": "10"},
        }
    )
    params = TransferParams(
        to=TOKEN, amount=0, fee=2000, parameter={"entrypoint": "transfer", "value": {"int": "1"}}, raw_param=True
    )
    assert provider.transfer(params) == "onHash"

    (ops,) = injector.injected
    assert [op["kind"] for op in ops] == ["reveal", "transaction"]
    assert [op["counter"] for op in ops] == ["11", "12"]
    assert ops[0]["public_key"] == "edpkTestKey"
    tx = ops[1]
    assert tx["destination"] == TOKEN
    assert tx["fee"] == "2000"
    assert tx["gas_limit"] == str(OperationDefaults().transfer_gas_limit)
    assert tx["storage_limit"] == str(OperationDefaults().transfer_storage_limit)
    assert tx["parameters"] == {"entrypoint": "transfer", "value": {"int": "1"}}


def test_transfer_from_revealed_source_has_no_reveal():
    provider, _, injector, _ = _provider(
        {
            f"GET {HEAD}/context/contracts/{ALICE}/manager_key": "edpkAlice",
            f"GET {HEAD}/context/contracts/{ALICE}": {"counter": "3"},
        },
        defaults=OperationDefaults(transfer_fee=5),
    )
    provider.transfer(TransferParams(to=BOB, amount=1_000_000))
    (ops,) = injector.injected
    assert len(ops) == 1
    assert ops[0]["counter"] == "4"
    assert ops[0]["amount"] == "1000000"
    assert ops[0]["fee"] == "5"
    assert "parameters" not in ops[0]


def test_legacy_raw_parameter_is_sent_on_default_entrypoint():
    provider, _, injector, _ = _provider(
        {
            f"GET {HEAD}/context/contracts/{ALICE}/manager_key": "edpkAlice",
            f"GET {HEAD}/context/contracts/{ALICE}": {"counter": "0"},
        }
    )
    legacy_value = {"prim": "Left", "args": [{"int": "3"}]}
    provider.transfer(TransferParams(to=TOKEN, parameter=legacy_value, raw_param=True))
    assert injector.injected[0][0]["parameters"] == {"entrypoint": "default", "value": legacy_value}


def test_counter_fetch_failure_injects_nothing():
    def broken(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json=[{"kind": "permanent"}])

    provider, _, injector, _ = _provider(
        {
            f"GET {HEAD}/context/contracts/{ALICE}/manager_key": "edpkAlice",
            f"GET {HEAD}/context/contracts/{ALICE}": broken,
        }
    )
    with pytest.raises(PreparationError):
        provider.transfer(TransferParams(to=BOB, amount=1))
    assert injector.injected == []


def test_injector_errors_propagate_verbatim():
    boom = RuntimeError("signer offline")
    provider, _, _, _ = _provider(
        {
            f"GET {HEAD}/context/contracts/{ALICE}/manager_key": "edpkAlice",
            f"GET {HEAD}/context/contracts/{ALICE}": {"counter": "0"},
        },
        injector=FakeInjector(fail=boom),
    )
    with pytest.raises(RuntimeError) as ei:
        provider.transfer(TransferParams(to=BOB))
    assert ei.value is boom


def test_at_builds_entrypoint_contract_and_send_reaches_injector():
    factory = FakeSchemaFactory(FakeParameterSchema("nat"))
    provider, _, injector, _ = _provider(
        {
            f"GET {HEAD}/context/contracts/{TOKEN}/script": SCRIPT,
            f"GET {HEAD}/context/contracts/{TOKEN}/entrypoints": {
                "entrypoints": {"increment": {"prim": "int"}, "reset": {"prim": "unit"}}
            },
            f"GET {HEAD}/context/contracts/{ALICE}/manager_key": "edpkAlice",
            f"GET {HEAD}/context/contracts/{ALICE}": {"counter": "41"},
        },
        factory=factory,
    )
    contract = provider.at(TOKEN)
    assert contract.style is DispatchStyle.ENTRYPOINTS
    assert sorted(contract.methods) == ["increment", "reset"]

    assert contract.methods.increment(2).send() == "onHash"
    (ops,) = injector.injected
    assert ops[0]["counter"] == "42"
    assert ops[0]["parameters"] == {"entrypoint": "increment", "value": {"encoded": [2]}}


def test_at_falls_back_to_legacy_when_node_has_no_entrypoints():
    provider, _, _, _ = _provider({f"GET {HEAD}/context/contracts/{TOKEN}/script": SCRIPT})
    contract = provider.at(TOKEN)
    assert contract.style is DispatchStyle.LEGACY
    assert list(contract.methods) == ["main"]


def test_storage_decodes_big_maps_lazily():
    big_map_type = {"prim": "big_map", "args": [{"prim": "string"}, {"prim": "nat"}]}
    factory = FakeSchemaFactory(FakeParameterSchema("nat"), storage=FakeSchema(big_map_type))
    provider, node, _, _ = _provider(
        {f"GET {HEAD}/context/contracts/{TOKEN}/storage": {"int": "42"}}, factory=factory
    )
    value = provider.get_storage(TOKEN, factory.storage)
    assert isinstance(value, BigMapAbstraction)
    assert value.id == 42
    assert node.paths() == [f"{HEAD}/context/contracts/{TOKEN}/storage"]


def test_big_map_lookup_by_id_uses_script_expression_hash():
    packed = "050100000005616c696365"
    expr = script_expr_hash(bytes.fromhex(packed))
    provider, node, _, _ = _provider(
        {
            f"POST {HEAD}/helpers/scripts/pack_data": {"packed": packed},
            f"GET {HEAD}/context/big_maps/42/{expr}": {"int": "7"},
        }
    )
    assert provider.get_big_map_key_by_id(42, "alice", FakeSchema()) == {"decoded": {"int": "7"}}
    body = json.loads(node.requests[0].content)
    assert body == {"data": {"string": "alice"}, "type": {"prim": "string"}}
    assert node.paths()[-1] == f"{HEAD}/context/big_maps/42/{expr}"
    assert expr.startswith("expr")


def test_big_map_lookup_through_contract():
    provider, node, _, _ = _provider(
        {f"POST {HEAD}/context/contracts/{TOKEN}/big_map_get": {"int": "1"}}
    )
    assert provider.get_big_map_key(TOKEN, "bob", FakeSchema()) == {"decoded": {"int": "1"}}
    assert json.loads(node.requests[0].content) == {"key": {"string": "bob"}, "type": {"prim": "string"}}
