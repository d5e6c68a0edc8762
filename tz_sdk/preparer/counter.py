"""
tz_sdk.preparer.counter
=======================

Per-account counter sequencing for operation batches.

Design
------
- A `Counter` holds the last counter handed out for one account. It reads the
  account's on-chain counter once, on the first `next()`, and advances in
  memory afterwards.
- A `CounterProvider` owns the account -> Counter map for one preparation
  session. It is created by the caller (or by the preparer, per batch) and is
  never shared implicitly.
- `CounterPreparer` walks a batch strictly in order and stamps a counter on
  every counter-bearing request. Requests for the same source therefore get
  consecutive counters in input order, which is what the node requires.

Invariants:
  - For a given Counter, values returned by `next()` are strictly increasing.
  - A provider holds at most one Counter per account.
  - A failed chain read caches nothing; the next `next()` reads again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence

from ..errors import PreparationError
from ..operations.types import has_counter, op_kind
from .types import ChainAccountQuery, PreparerContext

log = logging.getLogger(__name__)

__all__ = ["CounterValue", "Counter", "CounterProvider", "CounterPreparer"]


@dataclass(frozen=True)
class CounterValue:
    value: int


class Counter:
    """Counter state for one account."""

    def __init__(self, account: str, chain: ChainAccountQuery) -> None:
        self.account = account
        self._chain = chain
        self._last: Optional[int] = None

    @property
    def last(self) -> Optional[int]:
        """Last value handed out, or None before the first `next()`."""
        return self._last

    def next(self) -> CounterValue:
        counter = self._last
        if counter is None:
            counter = int(self._chain.get_account_counter(self.account))
            log.debug("counter baseline for %s is %d", self.account, counter)
        counter += 1
        self._last = counter
        return CounterValue(counter)

    def __repr__(self) -> str:
        return f"Counter(account={self.account!r}, last={self._last!r})"


class CounterProvider:
    """Account -> Counter registry for one preparation session."""

    def __init__(self) -> None:
        self._counters: Dict[str, Counter] = {}

    def for_account(self, account: str, chain: ChainAccountQuery) -> Counter:
        """Return the Counter for `account`, creating it on first use."""
        counter = self._counters.get(account)
        if counter is None:
            counter = Counter(account, chain)
            self._counters[account] = counter
        return counter

    def reset(self, account: str) -> None:
        """Forget `account`; its next counter is read from the chain again."""
        self._counters.pop(account, None)

    def reset_all(self) -> None:
        self._counters = {}

    def __contains__(self, account: object) -> bool:
        return account in self._counters

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._counters))

    def __len__(self) -> int:
        return len(self._counters)


class CounterPreparer:
    """
    Assigns counters to the counter-bearing requests of a batch.

    Reveal, transaction, origination and delegation requests receive a
    `counter` (decimal string) from the Counter of `context.source`;
    activations pass through unchanged. The input requests are never
    mutated: annotated requests are copies, and if any counter cannot be
    obtained the whole batch fails with `PreparationError`.
    """

    def prepare(
        self,
        ops: Sequence[Dict[str, Any]],
        context: PreparerContext,
        counters: Optional[CounterProvider] = None,
    ) -> List[Dict[str, Any]]:
        counters = counters if counters is not None else CounterProvider()
        results: List[Dict[str, Any]] = []
        for index, op in enumerate(ops):
            if not has_counter(op):
                results.append(op)
                continue
            it = counters.for_account(context.source, context.chain)
            try:
                value = it.next().value
            except Exception as e:
                raise PreparationError(
                    message=f"cannot obtain counter: {e}",
                    index=index,
                    kind=op_kind(op),
                    source=context.source,
                ) from e
            results.append({**op, "counter": str(value)})
        log.debug("prepared %d operations for %s", len(results), context.source)
        return results
