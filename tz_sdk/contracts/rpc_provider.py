"""
tz_sdk.contracts.rpc_provider
=============================

`ContractProvider` backed by a node's RPC.

- `at(address)` fetches the script and entrypoint map and builds a `Contract`.
- Storage and big-map reads go through the node and are decoded with the
  caller's schema (big maps decode to lazy handles).
- `transfer(params)` turns a contract call into a transaction request,
  prepends a reveal when the source is not revealed yet, assigns counters with
  `CounterPreparer` and hands the batch to the injector.

The injector is the forging/signing/broadcast collaborator; whatever it
returns (operation hash, handle, ...) is returned unchanged, and its errors
propagate unchanged.

Example
-------
    rpc = RpcClient.from_config(SDKConfig.from_env())
    provider = RpcContractProvider(rpc, schema_factory=encoder, injector=signer_service)
    token = provider.at("KT1...")
    op = token.methods.transfer("tz1...", 5).send(fee=2_000)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Protocol

from ..config import OperationDefaults
from ..operations import build
from ..preparer import CounterPreparer, PreparerContext
from ..rpc.http import RpcClient
from ..utils.hash import script_expr_hash
from .contract import DEFAULT_ENTRYPOINT, Contract
from .interface import Schema, SchemaFactory, Semantic, TransferParams
from .semantic import smart_contract_abstraction_semantic

log = logging.getLogger(__name__)


class OperationInjector(Protocol):
    """Forges, signs and broadcasts a prepared batch."""

    @property
    def source(self) -> str: ...

    def public_key(self) -> str: ...

    def inject(self, ops: List[Dict[str, Any]]) -> Any: ...


def _parameters(params: TransferParams) -> Optional[Dict[str, Any]]:
    p = params.parameter
    if p is None:
        return None
    if isinstance(p, Mapping) and "entrypoint" in p and "value" in p:
        return {"entrypoint": p["entrypoint"], "value": p["value"]}
    # Legacy contracts: the encoded value already carries the routing.
    return {"entrypoint": DEFAULT_ENTRYPOINT, "value": p}


class RpcContractProvider:
    def __init__(
        self,
        rpc: RpcClient,
        schema_factory: SchemaFactory,
        injector: OperationInjector,
        defaults: Optional[OperationDefaults] = None,
    ) -> None:
        self._rpc = rpc
        self._schema_factory = schema_factory
        self._injector = injector
        self._defaults = defaults or OperationDefaults()
        self._preparer = CounterPreparer()

    @property
    def semantics(self) -> Semantic:
        return smart_contract_abstraction_semantic(self, self._schema_factory)

    # ------------------------------------------------------------------ contracts

    def at(self, address: str) -> Contract:
        script = self._rpc.get_script(address)
        entrypoints = self._rpc.get_entrypoints(address)
        return Contract(address, script, self, self._schema_factory, entrypoints)

    # ------------------------------------------------------------------ storage

    def get_storage(self, address: str, schema: Schema) -> Any:
        raw = self._rpc.get_storage(address)
        return schema.execute(raw, self.semantics)

    def get_big_map_key(self, address: str, key: Any, schema: Schema) -> Any:
        encoded = schema.encode_big_map_key(key)
        raw = self._rpc.get_big_map_key(address, encoded)
        return schema.execute_on_big_map_value(raw, self.semantics)

    def get_big_map_key_by_id(self, big_map_id: int, key: Any, schema: Schema) -> Any:
        encoded = schema.encode_big_map_key(key)
        packed = self._rpc.pack_data(encoded["key"], encoded["type"])
        expr = script_expr_hash(packed)
        log.debug("big map %d: key %r -> %s", big_map_id, key, expr)
        raw = self._rpc.get_big_map_value(big_map_id, expr)
        return schema.execute_on_big_map_value(raw, self.semantics)

    # ------------------------------------------------------------------ submission

    def prepare_transfer(self, params: TransferParams) -> List[Dict[str, Any]]:
        """Build and counter-stamp the batch for `params` without injecting it."""
        d = self._defaults
        source = params.source or self._injector.source
        ops: List[Dict[str, Any]] = []
        if source == self._injector.source and self._rpc.get_manager_key(source) is None:
            ops.append(
                dict(
                    build.reveal(
                        source=source,
                        public_key=self._injector.public_key(),
                        fee=d.reveal_fee,
                        gas_limit=d.reveal_gas_limit,
                        storage_limit=d.reveal_storage_limit,
                    )
                )
            )
        ops.append(
            dict(
                build.transaction(
                    source=source,
                    destination=params.to,
                    amount=params.amount,
                    fee=d.transfer_fee if params.fee is None else params.fee,
                    gas_limit=d.transfer_gas_limit if params.gas_limit is None else params.gas_limit,
                    storage_limit=d.transfer_storage_limit if params.storage_limit is None else params.storage_limit,
                    parameters=_parameters(params),
                )
            )
        )
        return self._preparer.prepare(ops, PreparerContext(source=source, chain=self._rpc))

    def transfer(self, params: TransferParams) -> Any:
        prepared = self.prepare_transfer(params)
        log.debug("injecting %d operation(s) to %s", len(prepared), params.to)
        return self._injector.inject(prepared)


__all__ = ["OperationInjector", "RpcContractProvider"]
