"""Governance module for the parcel registry.

Provides the hash-chained event log of committed registry mutations.
"""

from landregistry.governance.audit import AuditEntry, AuditLogger

__all__ = ["AuditEntry", "AuditLogger"]
