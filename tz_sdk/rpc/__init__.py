"""
tz_sdk.rpc
----------

Node RPC access.

This package exposes:
- RpcClient: HTTP client for the node's REST RPC (see .http)

Import style:

    from tz_sdk.rpc import RpcClient
    rpc = RpcClient(url="http://localhost:8732")
"""

from .http import RpcClient

__all__ = ["RpcClient"]
