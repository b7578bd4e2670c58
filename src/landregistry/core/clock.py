"""Logical block clock for requests that arrive outside a real ledger."""

from __future__ import annotations


class LedgerClock:
    """Monotonic block height, advanced once per state-changing request."""

    def __init__(self, height: int = 0) -> None:
        if height < 0:
            raise ValueError(f"Block height must be non-negative, got {height}")
        self._height = height

    @property
    def height(self) -> int:
        return self._height

    def advance(self) -> int:
        self._height += 1
        return self._height
