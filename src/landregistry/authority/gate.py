"""One-shot authority gate.

The registry holds at most one authority identity. It is recorded as an
explicit state tag, :class:`AuthorityUnset` or :class:`AuthoritySet`, and can
move from the first to the second exactly once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from landregistry.authority.verifier import AuthorityVerifier, StoredAuthorityVerifier
from landregistry.core.types import ErrorCode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthorityUnset:
    """No authority has been configured yet."""


@dataclass(frozen=True)
class AuthoritySet:
    """An authority has been configured and can no longer change."""

    identity: str


AuthorityState = AuthorityUnset | AuthoritySet


class AuthorityGate:
    """Holds the registry authority and answers verification queries.

    Args:
        burn_identity: Null/burn principal that may never become the
            authority.
        verifier: Optional verification capability. Defaults to identity
            equality with the stored authority.
    """

    def __init__(
        self,
        burn_identity: str,
        verifier: AuthorityVerifier | None = None,
    ) -> None:
        self._burn_identity = burn_identity
        self._state: AuthorityState = AuthorityUnset()
        self._verifier = verifier or StoredAuthorityVerifier(lambda: self.authority)

    @property
    def state(self) -> AuthorityState:
        return self._state

    @property
    def authority(self) -> str | None:
        if isinstance(self._state, AuthoritySet):
            return self._state.identity
        return None

    @property
    def is_configured(self) -> bool:
        return isinstance(self._state, AuthoritySet)

    def set_authority(self, identity: str) -> ErrorCode | None:
        """Record ``identity`` as the authority.

        Returns:
            None on success, otherwise the rejection code. A rejected call
            leaves the gate unchanged.
        """
        # A blank principal can never sign for the registry
        if not identity.strip() or identity == self._burn_identity:
            return ErrorCode.RESERVED_IDENTITY
        if isinstance(self._state, AuthoritySet):
            return ErrorCode.AUTHORITY_ALREADY_SET
        self._state = AuthoritySet(identity=identity)
        logger.info("Registry authority set to %s", identity)
        return None

    def is_verified(self, identity: str) -> bool:
        return self._verifier.is_verified(identity)

    def restore(self, identity: str | None) -> None:
        """Reinstate a previously persisted authority on an empty gate."""
        if isinstance(self._state, AuthoritySet):
            raise ValueError("Authority is already set; cannot restore over it")
        if identity:
            self._state = AuthoritySet(identity=identity)
