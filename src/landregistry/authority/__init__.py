"""Authority gate for the parcel registry.

Holds the single set-once authority identity and delegates verification to
a pluggable :class:`AuthorityVerifier`.
"""

from landregistry.authority.gate import AuthorityGate, AuthoritySet, AuthorityUnset
from landregistry.authority.verifier import (
    AuthorityRosterVerifier,
    AuthorityVerifier,
    StoredAuthorityVerifier,
)

__all__ = [
    "AuthorityGate",
    "AuthorityRosterVerifier",
    "AuthoritySet",
    "AuthorityUnset",
    "AuthorityVerifier",
    "StoredAuthorityVerifier",
]
