"""Value transfer protocol and an in-memory mock ledger."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from landregistry.finance.models import TransferRecord

logger = logging.getLogger(__name__)


@runtime_checkable
class ValueTransfer(Protocol):
    """Protocol for an atomic value transfer primitive.

    Implementations either move the full ``amount`` and return True, or
    leave every balance untouched and return False.
    """

    def transfer(self, amount: int, sender: str, recipient: str) -> bool: ...


class InMemoryLedger:
    """Mock ledger that records every completed transfer.

    With ``balances`` left as None every transfer succeeds. When balances
    are given, a sender must hold at least ``amount``; unknown senders hold
    nothing.
    """

    def __init__(self, balances: dict[str, int] | None = None) -> None:
        self._balances: dict[str, int] | None = dict(balances) if balances is not None else None
        self._transfers: list[TransferRecord] = []

    @property
    def transfers(self) -> list[TransferRecord]:
        return list(self._transfers)

    def balance_of(self, identity: str) -> int | None:
        if self._balances is None:
            return None
        return self._balances.get(identity, 0)

    def transfer(self, amount: int, sender: str, recipient: str) -> bool:
        if amount <= 0:
            logger.warning("Rejected non-positive transfer of %d from %s", amount, sender)
            return False

        if self._balances is not None:
            available = self._balances.get(sender, 0)
            if available < amount:
                logger.warning(
                    "Insufficient balance for %s: has %d, needs %d", sender, available, amount
                )
                return False
            self._balances[sender] = available - amount
            self._balances[recipient] = self._balances.get(recipient, 0) + amount

        self._transfers.append(TransferRecord(amount=amount, sender=sender, recipient=recipient))
        return True
