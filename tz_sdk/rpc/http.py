from __future__ import annotations

"""
HTTP client for a node's REST RPC (sync).

- Built on httpx; a custom `transport` can be injected (tests use
  `httpx.MockTransport`).
- Retries transient transport failures and 429/502/503/504 with exponential
  backoff and jitter; any other HTTP error surfaces as `RpcError` right away.
- Only the handful of endpoints the SDK needs are wrapped; `get`/`post` give
  access to the rest.

Example:
    from tz_sdk.rpc.http import RpcClient
    with RpcClient("http://localhost:8732") as rpc:
        print(rpc.get_account_counter("tz1..."))
"""

import json
import logging
import random
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

import httpx

from ..config import SDKConfig
from ..errors import RpcError
from ..version import __version__ as SDK_VERSION

log = logging.getLogger(__name__)

JSON = Union[dict, list, str, int, float, bool, None]


def _is_retriable_http(status: int) -> bool:
    return status in (429, 502, 503, 504)


def _jitter_backoff(base: float, factor: float, attempt: int, jitter: float) -> float:
    # Exponential backoff with jitter in [0, jitter]
    return base * (factor ** max(attempt - 1, 0)) + random.random() * jitter


class _Transient(Exception):
    """Internal marker for a retriable failure."""

    def __init__(self, error: RpcError) -> None:
        super().__init__(str(error))
        self.error = error


@dataclass
class RpcClient:
    """Synchronous REST client bound to one chain/block selector."""

    url: str
    chain: str = "main"
    block: str = "head"
    timeout: float = 30.0
    max_retries: int = 3
    backoff_base: float = 0.15
    backoff_factor: float = 1.8
    backoff_jitter: float = 0.2
    headers: Optional[Mapping[str, str]] = None
    transport: Optional[httpx.BaseTransport] = None
    _client: Any = field(init=False, default=None, repr=False)

    def __post_init__(self) -> None:
        merged_headers: Dict[str, str] = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": f"tz-sdk-py/{SDK_VERSION}",
        }
        if self.headers:
            merged_headers.update(dict(self.headers))
        self._client = httpx.Client(
            base_url=self.url.rstrip("/"),
            timeout=self.timeout,
            headers=merged_headers,
            transport=self.transport,
        )

    @classmethod
    def from_config(
        cls, cfg: SDKConfig, *, transport: Optional[httpx.BaseTransport] = None
    ) -> "RpcClient":
        return cls(
            url=cfg.rpc_url,
            chain=cfg.chain,
            block=cfg.block,
            timeout=cfg.request_timeout,
            max_retries=cfg.max_retries,
            backoff_base=cfg.backoff_base,
            backoff_factor=cfg.backoff_factor,
            headers=cfg.http_headers(),
            transport=transport,
        )

    # --- context manager -------------------------------------------------

    def __enter__(self) -> "RpcClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    # --- generic access --------------------------------------------------

    @property
    def block_prefix(self) -> str:
        return f"/chains/{self.chain}/blocks/{self.block}"

    def get(self, path: str) -> JSON:
        return self._request("GET", path)

    def post(self, path: str, body: JSON) -> JSON:
        return self._request("POST", path, body)

    # --- chain account query ---------------------------------------------

    def get_contract(self, address: str) -> Optional[Dict[str, Any]]:
        """Account/contract summary (balance, counter, ...) or None if unknown to the node."""
        try:
            res = self.get(f"{self.block_prefix}/context/contracts/{address}")
        except RpcError as e:
            if e.is_not_found:
                return None
            raise
        if res is not None and not isinstance(res, dict):
            raise RpcError(path=address, message="unexpected contract payload", data=res)
        return res

    def get_account_counter(self, address: str) -> int:
        """
        Current on-chain counter of `address`. Accounts that are unknown to the
        node (or have never been used) report 0.
        """
        contract = self.get_contract(address)
        if not contract:
            return 0
        raw = contract.get("counter") or "0"
        try:
            return int(raw, 10) if isinstance(raw, str) else int(raw)
        except ValueError as e:
            raise RpcError(path=address, message=f"unexpected counter value {raw!r}") from e

    def get_manager_key(self, address: str) -> Optional[str]:
        """Revealed public key of `address`, or None when not revealed yet."""
        try:
            res = self.get(f"{self.block_prefix}/context/contracts/{address}/manager_key")
        except RpcError as e:
            if e.is_not_found:
                return None
            raise
        if isinstance(res, dict):  # older protocols: {"manager": ..., "key": ...}
            res = res.get("key")
        return res or None

    # --- contract metadata / storage -------------------------------------

    def get_script(self, address: str) -> Dict[str, Any]:
        res = self.get(f"{self.block_prefix}/context/contracts/{address}/script")
        if not isinstance(res, dict) or "code" not in res:
            raise RpcError(path=address, message="unexpected script payload", data=res)
        return res

    def get_entrypoints(self, address: str) -> Optional[Dict[str, Any]]:
        """
        Entrypoint map ({"entrypoints": {...}}) or None when the node does not
        expose the endpoint (legacy protocols).
        """
        try:
            res = self.get(f"{self.block_prefix}/context/contracts/{address}/entrypoints")
        except RpcError as e:
            if e.is_not_found:
                return None
            raise
        if not isinstance(res, dict):
            raise RpcError(path=address, message="unexpected entrypoints payload", data=res)
        res.setdefault("entrypoints", {})
        return res

    def get_storage(self, address: str) -> JSON:
        return self.get(f"{self.block_prefix}/context/contracts/{address}/storage")

    def get_big_map_key(self, address: str, encoded_key: Mapping[str, Any]) -> JSON:
        """Legacy per-contract big-map lookup. `encoded_key` is {"key": ..., "type": ...}."""
        return self.post(
            f"{self.block_prefix}/context/contracts/{address}/big_map_get",
            dict(encoded_key),
        )

    def pack_data(self, data: JSON, type_: JSON) -> bytes:
        res = self.post(
            f"{self.block_prefix}/helpers/scripts/pack_data",
            {"data": data, "type": type_},
        )
        if not isinstance(res, dict) or "packed" not in res:
            raise RpcError(path="pack_data", message="unexpected pack_data payload", data=res)
        return bytes.fromhex(res["packed"])

    def get_big_map_value(self, big_map_id: int, expr: str) -> JSON:
        return self.get(f"{self.block_prefix}/context/big_maps/{int(big_map_id)}/{expr}")

    # --- internals -------------------------------------------------------

    def _request(self, method: str, path: str, body: JSON = None) -> JSON:
        if self._client is None:
            raise RpcError(path=path, message="client is closed")
        last: Optional[RpcError] = None
        for attempt in range(1, self.max_retries + 2):  # N retries -> N+1 attempts
            try:
                return self._send_once(method, path, body)
            except _Transient as t:
                last = t.error
                if attempt > self.max_retries:
                    break
                delay = _jitter_backoff(self.backoff_base, self.backoff_factor, attempt, self.backoff_jitter)
                log.warning("rpc %s %s failed (%s); retry %d/%d in %.2fs", method, path, t.error.message, attempt, self.max_retries, delay)
                time.sleep(delay)
        assert last is not None
        raise last

    def _send_once(self, method: str, path: str, body: JSON) -> JSON:
        try:
            if method == "POST":
                r = self._client.post(path, content=json.dumps(body, separators=(",", ":")))
            else:
                r = self._client.get(path)
        except httpx.TransportError as e:
            raise _Transient(RpcError(path=path, message="network error", data=str(e))) from e

        if _is_retriable_http(r.status_code):
            raise _Transient(RpcError(path=path, message=f"HTTP {r.status_code}", status=r.status_code, data=r.text[:256]))
        if r.status_code >= 400:
            raise RpcError(path=path, message=f"HTTP {r.status_code}", status=r.status_code, data=_error_body(r))
        try:
            return r.json()
        except ValueError as e:
            raise RpcError(path=path, message="non-JSON response from RPC", status=r.status_code, data=r.text[:256]) from e


def _error_body(r: httpx.Response) -> JSON:
    # Nodes answer errors with a JSON list of {"kind", "id", ...}; keep text otherwise.
    try:
        return r.json()
    except ValueError:
        return r.text[:256]


__all__ = ["RpcClient"]
