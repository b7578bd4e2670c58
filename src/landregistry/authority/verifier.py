"""Authority verification protocol and in-process implementations."""

from __future__ import annotations

from typing import Callable, Iterable, Protocol, runtime_checkable


@runtime_checkable
class AuthorityVerifier(Protocol):
    """Protocol for deciding whether an identity is a verified authority."""

    def is_verified(self, identity: str) -> bool: ...


class StoredAuthorityVerifier:
    """Verifies an identity by equality with the gate's stored authority.

    Takes a zero-argument callable rather than the identity itself so the
    check always sees the current gate state.
    """

    def __init__(self, current_authority: Callable[[], str | None]) -> None:
        self._current_authority = current_authority

    def is_verified(self, identity: str) -> bool:
        authority = self._current_authority()
        return authority is not None and identity == authority


class AuthorityRosterVerifier:
    """Accepts any identity on a fixed roster of known authorities."""

    def __init__(self, identities: Iterable[str]) -> None:
        self._identities = frozenset(identities)

    @property
    def identities(self) -> frozenset[str]:
        return self._identities

    def is_verified(self, identity: str) -> bool:
        return identity in self._identities
