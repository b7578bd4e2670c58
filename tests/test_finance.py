"""Tests for the fee policy and the in-memory ledger."""

from __future__ import annotations

import pytest

from landregistry.authority import AuthorityGate
from landregistry.core.types import ErrorCode
from landregistry.finance import FeePolicy, InMemoryLedger, ValueTransfer


@pytest.fixture
def gate() -> AuthorityGate:
    return AuthorityGate(burn_identity="SP000000000000000000002Q6VF78")


class TestFeePolicy:
    def test_default_fee(self, gate):
        assert FeePolicy(gate).fee == 500

    def test_set_fee_requires_authority(self, gate):
        policy = FeePolicy(gate)
        assert policy.set_fee(1000) == ErrorCode.AUTHORITY_NOT_CONFIGURED
        assert policy.fee == 500

    def test_set_fee_after_authority(self, gate):
        gate.set_authority("ST2TEST")
        policy = FeePolicy(gate)
        assert policy.set_fee(1000) is None
        assert policy.fee == 1000

    def test_set_fee_zero_allowed(self, gate):
        gate.set_authority("ST2TEST")
        policy = FeePolicy(gate)
        assert policy.set_fee(0) is None
        assert policy.fee == 0

    def test_negative_fee_raises(self, gate):
        gate.set_authority("ST2TEST")
        with pytest.raises(ValueError, match="non-negative"):
            FeePolicy(gate).set_fee(-1)

    def test_negative_initial_fee_raises(self, gate):
        with pytest.raises(ValueError):
            FeePolicy(gate, initial_fee=-5)


class TestInMemoryLedger:
    def test_unlimited_ledger_records_transfers(self):
        ledger = InMemoryLedger()
        assert ledger.transfer(500, "ST1TEST", "ST2TEST") is True
        records = ledger.transfers
        assert len(records) == 1
        assert (records[0].amount, records[0].sender, records[0].recipient) == (
            500, "ST1TEST", "ST2TEST",
        )
        assert ledger.balance_of("ST1TEST") is None

    def test_non_positive_amount_rejected(self):
        ledger = InMemoryLedger()
        assert ledger.transfer(0, "ST1TEST", "ST2TEST") is False
        assert ledger.transfers == []

    def test_balances_move(self):
        ledger = InMemoryLedger(balances={"ST1TEST": 800})
        assert ledger.transfer(500, "ST1TEST", "ST2TEST") is True
        assert ledger.balance_of("ST1TEST") == 300
        assert ledger.balance_of("ST2TEST") == 500

    def test_insufficient_balance_leaves_no_effect(self):
        ledger = InMemoryLedger(balances={"ST1TEST": 100})
        assert ledger.transfer(500, "ST1TEST", "ST2TEST") is False
        assert ledger.balance_of("ST1TEST") == 100
        assert ledger.balance_of("ST2TEST") == 0
        assert ledger.transfers == []

    def test_transfers_property_is_a_copy(self):
        ledger = InMemoryLedger()
        ledger.transfer(1, "a", "b")
        ledger.transfers.clear()
        assert len(ledger.transfers) == 1

    def test_satisfies_protocol(self):
        assert isinstance(InMemoryLedger(), ValueTransfer)
