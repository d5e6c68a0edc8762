"""
tz_sdk.contracts
================

High-level helpers for working with smart contracts.

Submodules
----------
- contract     : `Contract`, `ContractMethod`, `LegacyContractMethod`.
- interface    : protocols for the encoder and the contract provider, `TransferParams`.
- semantic     : storage decoding hooks (lazy big maps).
- big_map      : `BigMapAbstraction`.
- rpc_provider : `RpcContractProvider`, the node-backed provider.

Typical usage
-------------
    from tz_sdk.contracts import RpcContractProvider

    provider = RpcContractProvider(rpc, schema_factory=encoder, injector=injector)
    contract = provider.at("KT1...")
    contract.methods.transfer("tz1...", 5).send()
"""

from .big_map import BigMapAbstraction
from .contract import (
    DEFAULT_ENTRYPOINT,
    DEFAULT_METHOD,
    Contract,
    ContractMethod,
    ContractMethods,
    DispatchStyle,
    EntrypointDescriptor,
    LegacyContractMethod,
)
from .interface import ContractProvider, ParameterSchema, Schema, SchemaFactory, TransferParams
from .rpc_provider import OperationInjector, RpcContractProvider
from .semantic import smart_contract_abstraction_semantic

__all__ = [
    "BigMapAbstraction",
    "DEFAULT_ENTRYPOINT",
    "DEFAULT_METHOD",
    "Contract",
    "ContractMethod",
    "ContractMethods",
    "DispatchStyle",
    "EntrypointDescriptor",
    "LegacyContractMethod",
    "ContractProvider",
    "ParameterSchema",
    "Schema",
    "SchemaFactory",
    "TransferParams",
    "OperationInjector",
    "RpcContractProvider",
    "smart_contract_abstraction_semantic",
]
