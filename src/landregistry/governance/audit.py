"""Hash-chained event log for registry mutations.

Every committed mutation (authority set, fee change, parcel registration,
parcel amendment, rollback) is appended to a JSONL file as one line. Each
entry's hash covers the previous entry's hash, so altering or removing any
line breaks the chain for every line after it.

The log is operational history. The registry's own amendment table keeps
only the latest change per parcel; this log keeps all of them.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

from landregistry.core.config import AuditConfig
from landregistry.core.types import AuditEvent

GENESIS_SEED = b"landregistry-genesis"


class AuditEntry:
    """An AuditEvent together with its position in the hash chain."""

    def __init__(self, event: AuditEvent, previous_hash: str, entry_hash: str) -> None:
        self.event = event
        self.previous_hash = previous_hash
        self.entry_hash = entry_hash

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dict suitable for one JSONL line."""
        return {
            "previous_hash": self.previous_hash,
            "entry_hash": self.entry_hash,
            "event": json.loads(self.event.model_dump_json()),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AuditEntry:
        """Rebuild an entry from a parsed JSONL line."""
        return cls(
            event=AuditEvent(**data["event"]),
            previous_hash=data["previous_hash"],
            entry_hash=data["entry_hash"],
        )


class AuditLogger:
    """Append-only, hash-chained log of registry events.

    An entry's hash is ``H(previous_hash + event_json)`` where ``H`` is the
    configured ``hash_algorithm`` (SHA-256 by default). The first entry
    chains from a fixed genesis hash, so two logs with the same events in the
    same order always end on the same hash.

    Args:
        config: AuditConfig instance. Defaults to AuditConfig() which reads
            from environment variables.
        log_file: Override the log file name (default: ``registry.jsonl``).
    """

    def __init__(
        self,
        config: AuditConfig | None = None,
        log_file: str = "registry.jsonl",
    ) -> None:
        self._config = config or AuditConfig()
        self._log_dir = Path(self._config.log_dir)
        self._log_dir.mkdir(parents=True, exist_ok=True)
        self._log_path = self._log_dir / log_file
        self._last_hash: str = self._compute_genesis_hash()

        # Continue an existing chain after a restart
        if self._log_path.exists():
            self._last_hash = self._recover_last_hash()

    @staticmethod
    def _compute_genesis_hash() -> str:
        """Return the seed hash the first entry chains from."""
        return hashlib.sha256(GENESIS_SEED).hexdigest()

    def _recover_last_hash(self) -> str:
        """Hash of the last entry on disk, or the genesis hash if there is none."""
        last_line: str | None = None
        with open(self._log_path) as fh:
            for line in fh:
                stripped = line.strip()
                if stripped:
                    last_line = stripped

        if last_line is None:
            return self._compute_genesis_hash()
        return json.loads(last_line)["entry_hash"]

    def _compute_hash(self, previous_hash: str, event_json: str) -> str:
        payload = (previous_hash + event_json).encode("utf-8")
        return hashlib.new(self._config.hash_algorithm, payload).hexdigest()

    def _read_entries(self) -> list[AuditEntry]:
        if not self._log_path.exists():
            return []
        with open(self._log_path) as fh:
            return [
                AuditEntry.from_dict(json.loads(line))
                for line in fh
                if line.strip()
            ]

    def log(self, event: AuditEvent) -> AuditEntry:
        """Append a registry event to the chain.

        Args:
            event: The committed mutation to record.

        Returns:
            The AuditEntry as written, with its previous and own hash.
        """
        event_json = event.model_dump_json()
        entry = AuditEntry(
            event=event,
            previous_hash=self._last_hash,
            entry_hash=self._compute_hash(self._last_hash, event_json),
        )

        with open(self._log_path, "a") as fh:
            fh.write(json.dumps(entry.to_dict()) + "\n")

        self._last_hash = entry.entry_hash
        return entry

    def verify_chain(self) -> bool:
        """Recompute every hash from genesis.

        Returns:
            True if every entry links to its predecessor and its stored hash
            matches its event; False at the first entry that does not. An
            empty or missing log is valid.
        """
        previous_hash = self._compute_genesis_hash()

        for entry in self._read_entries():
            if entry.previous_hash != previous_hash:
                return False
            expected = self._compute_hash(previous_hash, entry.event.model_dump_json())
            if entry.entry_hash != expected:
                return False
            previous_hash = entry.entry_hash

        return True

    def query(self, filters: dict[str, Any] | None = None) -> list[AuditEvent]:
        """Query registry events with optional filters, oldest first.

        Supported filter keys:
            - ``actor``: exact match on the calling principal
            - ``action``: exact match, e.g. ``parcel.updated``
            - ``resource``: exact match, e.g. ``parcel:3``
            - ``from_block``: only events at or above this block height
            - ``to_block``: only events at or below this block height
        """
        filters = filters or {}
        results: list[AuditEvent] = []

        for entry in self._read_entries():
            event = entry.event
            if "actor" in filters and event.actor != filters["actor"]:
                continue
            if "action" in filters and event.action != filters["action"]:
                continue
            if "resource" in filters and event.resource != filters["resource"]:
                continue
            if "from_block" in filters and event.block_height < filters["from_block"]:
                continue
            if "to_block" in filters and event.block_height > filters["to_block"]:
                continue
            results.append(event)

        return results

    def parcel_history(self, parcel_id: int) -> list[AuditEvent]:
        """Every recorded event for one parcel, registration first."""
        return self.query({"resource": f"parcel:{parcel_id}"})

    @property
    def log_path(self) -> Path:
        """Path to the JSONL log file."""
        return self._log_path

    @property
    def last_hash(self) -> str:
        """Hash of the most recent entry, or the genesis hash if empty."""
        return self._last_hash
