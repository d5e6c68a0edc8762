"""
SDK configuration: node RPC endpoint, chain/block selectors, retry/timeouts
and default operation limits.

- Loads sane defaults and supports overrides via environment variables (TZ_SDK_*).
- Optional YAML/JSON config files (`SDKConfig.from_file`).
- Provides helpers for building HTTP headers and validating endpoints.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .errors import ConfigError
from .version import __version__

_DEFAULT_RPC = "http://127.0.0.1:8732"
_DEFAULT_UA = f"tz-sdk-py/{__version__}"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None and v != "" else default


def _ensure_scheme(url: Optional[str], allowed: tuple[str, ...]) -> Optional[str]:
    if not url:
        return url
    lower = url.lower()
    if not any(lower.startswith(f"{sch}://") for sch in allowed):
        raise ConfigError(f"URL must start with {allowed}, got: {url!r}", key="rpc_url")
    return url


def _as_float(key: str, val: Any) -> float:
    try:
        return float(val)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"expected a number, got {val!r}", key=key) from e


def _as_int(key: str, val: Any) -> int:
    try:
        return int(val)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"expected an integer, got {val!r}", key=key) from e


def _log_level(val: Any) -> str:
    s = str(val).strip().upper()
    if s not in _LOG_LEVELS:
        raise ConfigError(f"unknown log level {val!r}", key="log_level")
    return s


@dataclass(frozen=True)
class OperationDefaults:
    """
    Fallback fee / gas / storage values (mutez and gas units) applied when a
    caller does not provide them.
    """

    transfer_fee: int = 1_420
    transfer_gas_limit: int = 10_600
    transfer_storage_limit: int = 300
    reveal_fee: int = 1_420
    reveal_gas_limit: int = 10_600
    reveal_storage_limit: int = 0


@dataclass(slots=True)
class SDKConfig:
    # Node
    rpc_url: str = field(default_factory=lambda: _DEFAULT_RPC)
    chain: str = "main"
    block: str = "head"
    # HTTP behavior
    request_timeout: float = 10.0
    max_retries: int = 3
    backoff_base: float = 0.15
    backoff_factor: float = 1.8
    # Identity / diagnostics
    user_agent: str = field(default_factory=lambda: _DEFAULT_UA)
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, prefix: str = "TZ_SDK_") -> "SDKConfig":
        """
        Create config from environment variables:

        TZ_SDK_RPC_URL          (http/https)
        TZ_SDK_CHAIN            (chain selector, default "main")
        TZ_SDK_BLOCK            (block selector, default "head")
        TZ_SDK_TIMEOUT          (float seconds)
        TZ_SDK_MAX_RETRIES      (int)
        TZ_SDK_BACKOFF_BASE     (float seconds)
        TZ_SDK_BACKOFF          (float multiplier)
        TZ_SDK_USER_AGENT       (str)
        TZ_SDK_LOG_LEVEL        (DEBUG/INFO/WARNING/ERROR/CRITICAL)
        """
        rpc = _env(f"{prefix}RPC_URL", _DEFAULT_RPC)
        _ensure_scheme(rpc, ("http", "https"))
        return cls(
            rpc_url=rpc or _DEFAULT_RPC,
            chain=_env(f"{prefix}CHAIN", "main") or "main",
            block=_env(f"{prefix}BLOCK", "head") or "head",
            request_timeout=_as_float("request_timeout", _env(f"{prefix}TIMEOUT", "10.0")),
            max_retries=_as_int("max_retries", _env(f"{prefix}MAX_RETRIES", "3")),
            backoff_base=_as_float("backoff_base", _env(f"{prefix}BACKOFF_BASE", "0.15")),
            backoff_factor=_as_float("backoff_factor", _env(f"{prefix}BACKOFF", "1.8")),
            user_agent=_env(f"{prefix}USER_AGENT", _DEFAULT_UA) or _DEFAULT_UA,
            log_level=_log_level(_env(f"{prefix}LOG_LEVEL", "WARNING")),
        )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "SDKConfig":
        """
        Load from a YAML (.yaml/.yml) or JSON file. Keys mirror the dataclass
        fields; unknown keys are rejected so typos do not go unnoticed.
        """
        p = Path(path)
        try:
            text = p.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"cannot read config file {p}: {e}") from e
        try:
            if p.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(text) or {}
            else:
                data = json.loads(text)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigError(f"cannot parse config file {p}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"config file {p} must contain a mapping")
        unknown = sorted(set(data) - set(cls().to_dict()))
        if unknown:
            raise ConfigError(f"unknown keys: {', '.join(unknown)}")
        return cls.with_overrides(cls(), **data)

    @classmethod
    def with_overrides(
        cls, base: Optional["SDKConfig"] = None, **overrides: Any
    ) -> "SDKConfig":
        """
        Build from an existing config plus keyword overrides.
        Unknown keys and None values are ignored.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data and v is not None})
        _ensure_scheme(data["rpc_url"], ("http", "https"))
        data["request_timeout"] = _as_float("request_timeout", data["request_timeout"])
        data["max_retries"] = _as_int("max_retries", data["max_retries"])
        data["backoff_base"] = _as_float("backoff_base", data["backoff_base"])
        data["backoff_factor"] = _as_float("backoff_factor", data["backoff_factor"])
        data["log_level"] = _log_level(data["log_level"])
        return cls(**data)

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level, logging.WARNING)

    def http_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rpc_url": self.rpc_url,
            "chain": self.chain,
            "block": self.block,
            "request_timeout": float(self.request_timeout),
            "max_retries": int(self.max_retries),
            "backoff_base": float(self.backoff_base),
            "backoff_factor": float(self.backoff_factor),
            "user_agent": self.user_agent,
            "log_level": self.log_level,
        }


__all__ = ["SDKConfig", "OperationDefaults"]
