"""
tz-sdk for Python.
Operation preparation (counter sequencing) and smart contract abstraction
for Tezos-style nodes. Convenience exports for the most common APIs.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import OperationDefaults, SDKConfig  # noqa: F401
from .errors import (  # noqa: F401
    ConfigError,
    EncodeError,
    InvalidArgumentsError,
    PreparationError,
    RpcError,
    TzSdkError,
    UnknownEntrypointError,
)

# RPC
from .rpc.http import RpcClient  # noqa: F401

# Operations & preparation
from .operations import OpKind  # noqa: F401
from .preparer import Counter, CounterPreparer, CounterProvider, PreparerContext  # noqa: F401

# Contracts
from .contracts import (  # noqa: F401
    BigMapAbstraction,
    Contract,
    ContractMethod,
    LegacyContractMethod,
    RpcContractProvider,
    TransferParams,
    smart_contract_abstraction_semantic,
)

__all__ = [
    "__version__",
    # Core
    "SDKConfig", "OperationDefaults",
    "TzSdkError", "RpcError", "PreparationError", "InvalidArgumentsError",
    "UnknownEntrypointError", "EncodeError", "ConfigError",
    # RPC
    "RpcClient",
    # Operations
    "OpKind", "Counter", "CounterProvider", "CounterPreparer", "PreparerContext",
    # Contracts
    "Contract", "ContractMethod", "LegacyContractMethod", "RpcContractProvider",
    "TransferParams", "BigMapAbstraction", "smart_contract_abstraction_semantic",
]
