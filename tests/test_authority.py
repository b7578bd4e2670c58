"""Tests for the authority gate and verifiers."""

from __future__ import annotations

import pytest

from landregistry.authority import (
    AuthorityGate,
    AuthorityRosterVerifier,
    AuthoritySet,
    AuthorityUnset,
    AuthorityVerifier,
    StoredAuthorityVerifier,
)
from landregistry.core.types import ErrorCode

BURN = "SP000000000000000000002Q6VF78"


@pytest.fixture
def gate() -> AuthorityGate:
    return AuthorityGate(burn_identity=BURN)


class TestAuthorityGate:
    def test_starts_unset(self, gate):
        assert isinstance(gate.state, AuthorityUnset)
        assert gate.authority is None
        assert gate.is_configured is False

    def test_set_authority(self, gate):
        assert gate.set_authority("ST2TEST") is None
        assert gate.state == AuthoritySet(identity="ST2TEST")
        assert gate.authority == "ST2TEST"
        assert gate.is_configured is True

    def test_second_set_rejected_and_unchanged(self, gate):
        gate.set_authority("ST2TEST")
        assert gate.set_authority("ST9OTHER") == ErrorCode.AUTHORITY_ALREADY_SET
        assert gate.authority == "ST2TEST"

    def test_burn_identity_rejected(self, gate):
        assert gate.set_authority(BURN) == ErrorCode.RESERVED_IDENTITY
        assert gate.is_configured is False

    def test_burn_identity_checked_before_already_set(self, gate):
        gate.set_authority("ST2TEST")
        assert gate.set_authority(BURN) == ErrorCode.RESERVED_IDENTITY

    @pytest.mark.parametrize("identity", ["", "   ", "\t"])
    def test_blank_identity_rejected(self, gate, identity):
        assert gate.set_authority(identity) == ErrorCode.RESERVED_IDENTITY
        assert gate.is_configured is False
        # The one-shot slot is still available afterwards
        assert gate.set_authority("ST2TEST") is None
        assert gate.authority == "ST2TEST"

    def test_restore_blank_leaves_unset(self, gate):
        gate.restore("")
        assert gate.is_configured is False

    def test_is_verified_by_equality(self, gate):
        assert gate.is_verified("ST2TEST") is False
        gate.set_authority("ST2TEST")
        assert gate.is_verified("ST2TEST") is True
        assert gate.is_verified("ST1TEST") is False

    def test_custom_verifier(self):
        gate = AuthorityGate(BURN, verifier=AuthorityRosterVerifier({"ST1TEST", "ST4TEST"}))
        assert gate.is_verified("ST1TEST") is True
        assert gate.is_verified("ST2TEST") is False

    def test_restore_sets_authority(self, gate):
        gate.restore("ST2TEST")
        assert gate.authority == "ST2TEST"

    def test_restore_none_leaves_unset(self, gate):
        gate.restore(None)
        assert gate.is_configured is False

    def test_restore_over_existing_raises(self, gate):
        gate.set_authority("ST2TEST")
        with pytest.raises(ValueError, match="already set"):
            gate.restore("ST9OTHER")


class TestVerifiers:
    def test_stored_verifier_tracks_current_value(self):
        current = {"authority": None}
        verifier = StoredAuthorityVerifier(lambda: current["authority"])
        assert verifier.is_verified("ST2TEST") is False
        current["authority"] = "ST2TEST"
        assert verifier.is_verified("ST2TEST") is True

    def test_roster_verifier(self):
        verifier = AuthorityRosterVerifier(["ST1TEST"])
        assert verifier.identities == frozenset({"ST1TEST"})
        assert verifier.is_verified("ST1TEST") is True
        assert verifier.is_verified("ST3FAKE") is False

    def test_verifiers_satisfy_protocol(self):
        assert isinstance(AuthorityRosterVerifier([]), AuthorityVerifier)
        assert isinstance(StoredAuthorityVerifier(lambda: None), AuthorityVerifier)
