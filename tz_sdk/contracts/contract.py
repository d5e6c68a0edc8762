"""
tz_sdk.contracts.contract
=========================

Smart contract abstraction: turns a contract's on-chain interface into
callable, arity-checked entrypoint invocations.

    contract = provider.at("KT1...")
    op = contract.methods.transfer("tz1...", 5).send(fee=2000)

How methods are built
---------------------
The dispatch style is picked once, when the contract is constructed:

- ``ENTRYPOINTS``: the node reported an explicit entrypoint map. Each
  entrypoint becomes a method; a call builds a schema scoped to that
  entrypoint and returns a `ContractMethod` addressed by entrypoint name. An
  empty map yields a single ``main`` method addressed as ``default``.
- ``LEGACY``: no entrypoint map. If the parameter schema itself is
  multi-entrypoint, each branch of its description becomes a method;
  otherwise there is a single ``main``. Calls return `LegacyContractMethod`,
  whose encoded value carries the routing.

Arity check
-----------
The expected argument count is the number of keys of the schema's extracted
description when it is a composite (keyed) structure, and 1 otherwise. This
is a heuristic: a single argument whose type is itself a record is counted by
its fields. Mismatches raise `InvalidArgumentsError` when the method is
called, not when the contract is built.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..errors import EncodeError, InvalidArgumentsError, UnknownEntrypointError
from .interface import ContractProvider, ParameterSchema, Schema, SchemaFactory, TransferParams

log = logging.getLogger(__name__)

DEFAULT_ENTRYPOINT = "default"
DEFAULT_METHOD = "main"


class DispatchStyle(str, Enum):
    ENTRYPOINTS = "entrypoints"
    LEGACY = "legacy"


def compute_length(description: Any) -> int:
    """Expected argument count for an extracted schema description."""
    if isinstance(description, Mapping):
        return len(description)
    if isinstance(description, (list, tuple)):
        return len(description)
    return 1


def expected_keys(description: Any) -> List[str]:
    if isinstance(description, Mapping):
        return [str(k) for k in description.keys()]
    if isinstance(description, (list, tuple)):
        return [str(i) for i in range(len(description))]
    return []


def validate_arguments(name: str, args: Sequence[Any], description: Any) -> None:
    expected = compute_length(description)
    if len(args) != expected:
        raise InvalidArgumentsError(
            entrypoint=name,
            received=len(args),
            expected=expected,
            expected_keys=expected_keys(description),
        )


class ContractMethod:
    """A call to one entrypoint of a contract that exposes an entrypoint map."""

    def __init__(
        self,
        provider: ContractProvider,
        address: str,
        parameter_schema: ParameterSchema,
        name: str,
        args: Sequence[Any],
        is_multiple_entrypoint: bool = True,
    ) -> None:
        self._provider = provider
        self.address = address
        self.parameter_schema = parameter_schema
        self.name = name
        self.args: Tuple[Any, ...] = tuple(args)
        self.is_multiple_entrypoint = is_multiple_entrypoint

    @property
    def schema(self) -> Any:
        """Extracted description of this method's parameter."""
        return self.parameter_schema.extract_schema()

    @property
    def entrypoint(self) -> str:
        return self.name if self.is_multiple_entrypoint else DEFAULT_ENTRYPOINT

    def _encode(self, *args: Any) -> Any:
        try:
            return self.parameter_schema.encode(*args)
        except Exception as e:
            raise EncodeError(str(e), entrypoint=self.name) from e

    def _parameter(self) -> Any:
        return {"entrypoint": self.entrypoint, "value": self._encode(*self.args)}

    def to_transfer_params(
        self,
        *,
        fee: Optional[int] = None,
        gas_limit: Optional[int] = None,
        storage_limit: Optional[int] = None,
        amount: int = 0,
    ) -> TransferParams:
        return TransferParams(
            to=self.address,
            amount=amount,
            fee=fee,
            gas_limit=gas_limit,
            storage_limit=storage_limit,
            parameter=self._parameter(),
            raw_param=True,
        )

    def send(
        self,
        *,
        fee: Optional[int] = None,
        gas_limit: Optional[int] = None,
        storage_limit: Optional[int] = None,
        amount: int = 0,
    ) -> Any:
        """Encode the call and hand it to the provider's `transfer`; returns its result."""
        params = self.to_transfer_params(fee=fee, gas_limit=gas_limit, storage_limit=storage_limit, amount=amount)
        log.debug("sending %s(%d args) to %s", self.name, len(self.args), self.address)
        return self._provider.transfer(params)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(address={self.address!r}, name={self.name!r}, args={self.args!r})"


class LegacyContractMethod(ContractMethod):
    """
    A call on a contract without an entrypoint map. Routing is part of the
    encoded value: multi-entrypoint schemas take the method name as a leading
    selector argument.
    """

    def __init__(
        self,
        provider: ContractProvider,
        address: str,
        parameter_schema: ParameterSchema,
        name: str,
        args: Sequence[Any],
    ) -> None:
        super().__init__(provider, address, parameter_schema, name, args, parameter_schema.is_multiple_entrypoint)

    @property
    def schema(self) -> Any:
        description = self.parameter_schema.extract_schema()
        return description[self.name] if self.is_multiple_entrypoint else description

    def _parameter(self) -> Any:
        if self.is_multiple_entrypoint:
            return self._encode(self.name, *self.args)
        return self._encode(*self.args)


@dataclass(frozen=True)
class EntrypointDescriptor:
    """
    One callable method of a contract.

    `type_expr` is the entrypoint's Michelson type (entrypoint-map contracts)
    or the branch of the extracted parameter description (legacy contracts);
    it is None for the single ``main`` method.
    """

    name: str
    multiple: bool
    type_expr: Any = None


class ContractMethods:
    """
    Name -> method table, reachable as attributes (``methods.transfer``) or by
    subscript. It has no public attributes of its own, so an entrypoint named
    ``get`` or ``items`` resolves to the entrypoint.
    """

    def __init__(self, methods: Dict[str, Callable[..., ContractMethod]]) -> None:
        self.__dict__["_methods"] = dict(methods)

    def __getitem__(self, name: str) -> Callable[..., ContractMethod]:
        try:
            return self.__dict__["_methods"][name]
        except KeyError:
            raise UnknownEntrypointError(name, sorted(self.__dict__["_methods"])) from None

    def __getattribute__(self, name: str) -> Any:
        if not name.startswith("__"):
            methods = object.__getattribute__(self, "__dict__")["_methods"]
            if name in methods:
                return methods[name]
            raise UnknownEntrypointError(name, sorted(methods))
        return object.__getattribute__(self, name)

    def __contains__(self, name: object) -> bool:
        return name in self.__dict__["_methods"]

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("contract methods are read-only")

    def __iter__(self) -> Iterator[str]:
        return iter(self.__dict__["_methods"])

    def __len__(self) -> int:
        return len(self.__dict__["_methods"])

    def __dir__(self) -> List[str]:
        return sorted(set(super().__dir__()) | {n for n in self.__dict__["_methods"] if n.isidentifier()})


class Contract:
    """
    A deployed contract. `methods` exposes one callable per entrypoint (named
    properties when the contract is annotated, positional names otherwise).
    """

    def __init__(
        self,
        address: str,
        script: Mapping[str, Any],
        provider: ContractProvider,
        schema_factory: SchemaFactory,
        entrypoints: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.address = address
        self.script = script
        self._provider = provider
        self._schema_factory = schema_factory
        self.schema: Schema = schema_factory.storage_schema(script)
        self.parameter_schema: ParameterSchema = schema_factory.parameter_schema(script)

        if entrypoints is None:
            self.style = DispatchStyle.LEGACY
            self.entrypoints: Optional[Dict[str, Any]] = None
            table = self._legacy_table()
        else:
            self.style = DispatchStyle.ENTRYPOINTS
            if not isinstance(entrypoints.get("entrypoints"), Mapping):
                raise ValueError("entrypoints must be the node's response shape {'entrypoints': {name: type, ...}}")
            self.entrypoints = dict(entrypoints["entrypoints"])
            table = self._entrypoint_table(self.entrypoints)

        self._table: Dict[str, EntrypointDescriptor] = table
        self.methods = ContractMethods({name: self._bind(name) for name in table})
        log.debug("contract %s: %s dispatch, methods=%s", address, self.style.value, list(table))

    # ------------------------------------------------------------------ table construction

    @staticmethod
    def _entrypoint_table(entrypoints: Mapping[str, Any]) -> Dict[str, EntrypointDescriptor]:
        if entrypoints:
            return {name: EntrypointDescriptor(name, True, type_expr) for name, type_expr in entrypoints.items()}
        return {DEFAULT_METHOD: EntrypointDescriptor(DEFAULT_METHOD, False)}

    def _legacy_table(self) -> Dict[str, EntrypointDescriptor]:
        description = self.parameter_schema.extract_schema()
        if self.parameter_schema.is_multiple_entrypoint:
            return {str(name): EntrypointDescriptor(str(name), True, sub) for name, sub in description.items()}
        return {DEFAULT_METHOD: EntrypointDescriptor(DEFAULT_METHOD, False, description)}

    def _bind(self, name: str) -> Callable[..., ContractMethod]:
        def method(*args: Any) -> ContractMethod:
            return self.invoke(name, *args)

        method.__name__ = name
        method.__qualname__ = f"Contract.methods.{name}"
        method.__doc__ = f"Build a call to entrypoint {name!r} of {self.address}."
        return method

    # ------------------------------------------------------------------ dispatch

    def invoke(self, name: str, *args: Any) -> ContractMethod:
        """Validate `args` against entrypoint `name` and return the bound method call."""
        ep = self._table.get(name)
        if ep is None:
            raise UnknownEntrypointError(name, sorted(self._table))

        if self.style is DispatchStyle.ENTRYPOINTS:
            if ep.multiple:
                schema = self._schema_factory.parameter_schema_for(ep.type_expr)
            else:
                schema = self.parameter_schema
            validate_arguments(name, args, schema.extract_schema())
            return ContractMethod(self._provider, self.address, schema, name, args, ep.multiple)

        validate_arguments(name, args, ep.type_expr)
        return LegacyContractMethod(self._provider, self.address, self.parameter_schema, name, args)

    def entrypoint(self, name: str) -> EntrypointDescriptor:
        try:
            return self._table[name]
        except KeyError:
            raise UnknownEntrypointError(name, sorted(self._table)) from None

    # ------------------------------------------------------------------ storage

    def storage(self) -> Any:
        """Current storage, decoded through the contract's storage schema."""
        return self._provider.get_storage(self.address, self.schema)

    def big_map(self, key: Any) -> Any:
        """Value stored under `key` in the contract's big map."""
        return self._provider.get_big_map_key(self.address, key, self.schema)

    def __repr__(self) -> str:
        return f"Contract(address={self.address!r}, style={self.style.value}, methods={list(self._table)})"


__all__ = [
    "DEFAULT_ENTRYPOINT",
    "DEFAULT_METHOD",
    "DispatchStyle",
    "compute_length",
    "expected_keys",
    "validate_arguments",
    "ContractMethod",
    "LegacyContractMethod",
    "EntrypointDescriptor",
    "ContractMethods",
    "Contract",
]
