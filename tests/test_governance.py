"""Tests for the hash-chained registry event log."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from landregistry.core.config import AuditConfig
from landregistry.core.types import AuditEvent
from landregistry.governance.audit import AuditEntry, AuditLogger


def _make_event(**overrides) -> AuditEvent:
    """Helper to build an AuditEvent with sensible defaults."""
    defaults = {
        "actor": "ST1TEST",
        "action": "parcel.registered",
        "resource": "parcel:0",
        "block_height": 1,
    }
    defaults.update(overrides)
    return AuditEvent(**defaults)


@pytest.fixture()
def audit_dir(tmp_path: Path) -> Path:
    d = tmp_path / "audit"
    d.mkdir()
    return d


@pytest.fixture()
def logger(audit_dir: Path) -> AuditLogger:
    return AuditLogger(config=AuditConfig(log_dir=str(audit_dir)))


class TestAuditLogger:
    def test_log_creates_file(self, logger: AuditLogger) -> None:
        logger.log(_make_event())
        assert logger.log_path.exists()
        assert logger.log_path.name == "registry.jsonl"

    def test_creates_missing_directory(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "audit"
        AuditLogger(config=AuditConfig(log_dir=str(target)))
        assert target.is_dir()

    def test_hash_chain_links_entries(self, logger: AuditLogger) -> None:
        e1 = logger.log(_make_event(action="authority.set"))
        e2 = logger.log(_make_event(action="parcel.registered"))
        assert e2.previous_hash == e1.entry_hash
        assert logger.last_hash == e2.entry_hash

    def test_verify_chain_empty(self, logger: AuditLogger) -> None:
        assert logger.verify_chain() is True

    def test_verify_chain_multiple_entries(self, logger: AuditLogger) -> None:
        for i in range(5):
            logger.log(_make_event(resource=f"parcel:{i}"))
        assert logger.verify_chain() is True

    def test_tampered_entry_breaks_chain(self, logger: AuditLogger) -> None:
        logger.log(_make_event(details={"area": 100}))
        logger.log(_make_event(action="parcel.updated", details={"area": 200}))
        logger.log(_make_event(action="parcel.updated", details={"area": 300}))

        lines = logger.log_path.read_text().strip().split("\n")
        data = json.loads(lines[1])
        data["event"]["details"]["area"] = 999
        lines[1] = json.dumps(data)
        logger.log_path.write_text("\n".join(lines) + "\n")

        assert logger.verify_chain() is False

    def test_tampered_hash_breaks_chain(self, logger: AuditLogger) -> None:
        logger.log(_make_event())
        logger.log(_make_event())

        lines = logger.log_path.read_text().strip().split("\n")
        data = json.loads(lines[0])
        data["entry_hash"] = "0" * 64
        lines[0] = json.dumps(data)
        logger.log_path.write_text("\n".join(lines) + "\n")

        assert logger.verify_chain() is False

    def test_query_filters(self, logger: AuditLogger) -> None:
        logger.log(_make_event(actor="ST1TEST", action="parcel.registered", block_height=1))
        logger.log(_make_event(actor="ST1TEST", action="parcel.updated", block_height=2))
        logger.log(_make_event(actor="ST3FAKE", action="parcel.registered",
                               resource="parcel:1", block_height=3))

        assert len(logger.query()) == 3
        assert len(logger.query({"actor": "ST1TEST"})) == 2
        assert len(logger.query({"action": "parcel.registered"})) == 2
        assert len(logger.query({"resource": "parcel:1"})) == 1
        assert [e.block_height for e in logger.query({"from_block": 2})] == [2, 3]
        assert [e.block_height for e in logger.query({"to_block": 2})] == [1, 2]

    def test_recover_last_hash_on_reopen(self, audit_dir: Path) -> None:
        config = AuditConfig(log_dir=str(audit_dir))
        first = AuditLogger(config=config)
        e1 = first.log(_make_event())

        second = AuditLogger(config=config)
        assert second.last_hash == e1.entry_hash
        e2 = second.log(_make_event(action="parcel.updated"))
        assert e2.previous_hash == e1.entry_hash
        assert second.verify_chain() is True

    def test_entry_dict_round_trip(self, logger: AuditLogger) -> None:
        entry = logger.log(_make_event(details={"fee": 500}))
        restored = AuditEntry.from_dict(entry.to_dict())
        assert restored.entry_hash == entry.entry_hash
        assert restored.event == entry.event

    def test_parcel_history(self, logger: AuditLogger) -> None:
        logger.log(_make_event(resource="parcel:0", block_height=1))
        logger.log(_make_event(resource="parcel:1", block_height=2))
        logger.log(_make_event(action="parcel.updated", resource="parcel:0", block_height=3))

        history = logger.parcel_history(0)
        assert [e.action for e in history] == ["parcel.registered", "parcel.updated"]
        assert logger.parcel_history(7) == []

    def test_reopen_empty_file_starts_from_genesis(self, audit_dir: Path) -> None:
        config = AuditConfig(log_dir=str(audit_dir))
        (audit_dir / "registry.jsonl").write_text("\n")
        reopened = AuditLogger(config=config)
        genesis = AuditLogger._compute_genesis_hash()
        assert reopened.last_hash == genesis
        assert reopened.log(_make_event()).previous_hash == genesis
        assert reopened.verify_chain() is True
