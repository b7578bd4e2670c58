"""Registration fee policy."""

from __future__ import annotations

import logging

from landregistry.authority.gate import AuthorityGate
from landregistry.core.types import ErrorCode

logger = logging.getLogger(__name__)


class FeePolicy:
    """Holds the registration fee; changes are locked until an authority exists."""

    def __init__(self, gate: AuthorityGate, initial_fee: int = 500) -> None:
        if initial_fee < 0:
            raise ValueError(f"Registration fee must be non-negative, got {initial_fee}")
        self._gate = gate
        self._fee = initial_fee

    @property
    def fee(self) -> int:
        return self._fee

    def set_fee(self, new_fee: int) -> ErrorCode | None:
        if new_fee < 0:
            raise ValueError(f"Registration fee must be non-negative, got {new_fee}")
        if not self._gate.is_configured:
            return ErrorCode.AUTHORITY_NOT_CONFIGURED
        logger.info("Registration fee changed from %d to %d", self._fee, new_fee)
        self._fee = new_fee
        return None
