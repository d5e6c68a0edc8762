from __future__ import annotations

import pytest

from conftest import FakeParameterSchema, FakeSchemaFactory, RecordingProvider
from tz_sdk.contracts import BigMapAbstraction, smart_contract_abstraction_semantic

BIG_MAP_TYPE = {"prim": "big_map", "args": [{"prim": "string"}, {"prim": "nat"}]}


@pytest.fixture
def hooks():
    provider = RecordingProvider()
    factory = FakeSchemaFactory(FakeParameterSchema("unit"))
    return provider, factory, smart_contract_abstraction_semantic(provider, factory)


@pytest.mark.parametrize("value", [None, {}, {"int": None}, {"int": ""}, {"int": "abc"}, [], {"prim": "Elt"}, "42"])
def test_missing_id_yields_empty_placeholder(hooks, value):
    provider, factory, semantic = hooks
    assert semantic["big_map"](value, BIG_MAP_TYPE) == {}
    assert provider.calls == []
    assert factory.schemas_built == []


def test_id_yields_lazy_reference_without_io(hooks):
    provider, factory, semantic = hooks
    ref = semantic["big_map"]({"int": "42"}, BIG_MAP_TYPE)

    assert isinstance(ref, BigMapAbstraction)
    assert ref.id == 42
    assert str(ref) == "42"
    assert factory.schemas_built == [BIG_MAP_TYPE]
    assert ref.schema.type_expr == BIG_MAP_TYPE
    assert provider.calls == []


def test_keyed_lookup_delegates_with_the_id(hooks):
    provider, _, semantic = hooks
    ref = semantic["big_map"]({"int": "42"}, BIG_MAP_TYPE)

    assert ref.get("alice") == {"value": "alice", "id": 42}
    assert provider.calls == [("get_big_map_key_by_id", 42, "alice", ref.schema)]


def test_references_compare_by_id_and_provider(hooks):
    provider, _, semantic = hooks
    a = semantic["big_map"]({"int": "7"}, BIG_MAP_TYPE)
    b = semantic["big_map"]({"int": "7"}, BIG_MAP_TYPE)
    other = smart_contract_abstraction_semantic(RecordingProvider(), FakeSchemaFactory(FakeParameterSchema("unit")))
    assert a == b
    assert a != other["big_map"]({"int": "7"}, BIG_MAP_TYPE)
