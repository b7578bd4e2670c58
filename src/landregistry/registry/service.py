"""Land registry service.

Orchestrates the authority gate, fee policy, value transfer and parcel store
into the registry's public operations. Each call runs to completion before
returning: validate, then transfer, then commit. A rejected call leaves
every piece of state exactly as it was.
"""

from __future__ import annotations

import logging

from landregistry.authority.gate import AuthorityGate
from landregistry.authority.verifier import AuthorityVerifier
from landregistry.core.config import RegistryConfig
from landregistry.core.types import AuditEvent, ErrorCode, LedgerContext, RegistryResult
from landregistry.finance.fees import FeePolicy
from landregistry.finance.transfer import ValueTransfer
from landregistry.governance.audit import AuditLogger
from landregistry.parcels.models import Parcel, ParcelRegistration, ParcelUpdate
from landregistry.parcels.store import ParcelStore
from landregistry.registry.models import RegistrySnapshot, RegistryState

logger = logging.getLogger(__name__)


class LandRegistry:
    """Ledger-backed land parcel registry.

    Args:
        transfer: Value transfer primitive used to collect registration fees.
        config: Registry configuration. Defaults to RegistryConfig().
        verifier: Optional authority verification capability.
        audit_logger: Optional event log for committed mutations.
        max_parcels: Overrides ``config.max_parcels`` when given.
    """

    def __init__(
        self,
        transfer: ValueTransfer,
        config: RegistryConfig | None = None,
        verifier: AuthorityVerifier | None = None,
        audit_logger: AuditLogger | None = None,
        max_parcels: int | None = None,
    ) -> None:
        self._config = config or RegistryConfig()
        self._transfer = transfer
        self._audit = audit_logger
        self._verifier = verifier
        self._block_height = 0
        self._gate = AuthorityGate(self._config.burn_identity, verifier=verifier)
        self._fees = FeePolicy(self._gate, initial_fee=self._config.registration_fee)
        self._store = ParcelStore(
            max_parcels=self._config.max_parcels if max_parcels is None else max_parcels
        )

    # -- Administration --

    def set_authority_contract(self, ctx: LedgerContext, identity: str) -> RegistryResult:
        """Set the registry authority. Succeeds at most once."""
        code = self._gate.set_authority(identity)
        if code is not None:
            logger.debug("set_authority_contract by %s rejected: %s", ctx.caller, code.name)
            return RegistryResult.failure(code)

        self._record(ctx, "authority.set", f"authority:{identity}", {"identity": identity})
        return RegistryResult.success(True)

    def set_registration_fee(self, ctx: LedgerContext, fee: int) -> RegistryResult:
        """Change the registration fee; requires a configured authority."""
        previous = self._fees.fee
        code = self._fees.set_fee(fee)
        if code is not None:
            logger.debug("set_registration_fee by %s rejected: %s", ctx.caller, code.name)
            return RegistryResult.failure(code)

        self._record(
            ctx, "fee.changed", "registry:fee", {"previous": previous, "fee": fee}
        )
        return RegistryResult.success(True)

    # -- Parcel mutations --

    def register(self, ctx: LedgerContext, fields: ParcelRegistration) -> RegistryResult:
        """Register a parcel described by ``fields`` on behalf of ``ctx.caller``.

        Returns:
            On success the new parcel id; otherwise the first failing rule's
            code, or TRANSFER_FAILED when the fee could not be collected.
        """
        code = self._store.validate_for_registration(
            fields, authority_configured=self._gate.is_configured
        )
        if code is not None:
            logger.debug("register_parcel by %s rejected: %s", ctx.caller, code.name)
            return RegistryResult.failure(code)

        fee = self._fees.fee
        authority = self._gate.authority
        # Validation guarantees an authority; a zero fee has nothing to move.
        if fee > 0 and not self._transfer.transfer(fee, ctx.caller, authority):
            logger.warning(
                "Fee transfer of %d from %s to %s failed; registration aborted",
                fee, ctx.caller, authority,
            )
            return RegistryResult.failure(ErrorCode.TRANSFER_FAILED)

        parcel_id = self._store.insert(fields, registrant=ctx.caller, now=ctx.block_height)
        logger.info(
            "Registered parcel %d for %s at block %d", parcel_id, ctx.caller, ctx.block_height
        )
        self._record(
            ctx,
            "parcel.registered",
            f"parcel:{parcel_id}",
            {"geo_hash": bytes(fields.geo_hash).hex(), "fee": fee},
        )
        return RegistryResult.success(parcel_id)

    def register_parcel(
        self,
        ctx: LedgerContext,
        geo_hash: bytes,
        boundaries: str,
        community_id: int,
        description: str,
        ownership_type: str,
        area: int,
        location: str,
        docs_hash: bytes,
        coordinates: str,
        zone: str,
        access_level: int,
    ) -> RegistryResult:
        return self.register(
            ctx,
            ParcelRegistration(
                geo_hash=geo_hash,
                boundaries=boundaries,
                community_id=community_id,
                description=description,
                ownership_type=ownership_type,
                area=area,
                location=location,
                docs_hash=docs_hash,
                coordinates=coordinates,
                zone=zone,
                access_level=access_level,
            ),
        )

    def update_parcel(
        self,
        ctx: LedgerContext,
        parcel_id: int,
        boundaries: str,
        description: str,
        area: int,
    ) -> RegistryResult:
        """Amend a parcel's mutable fields. Only its registrant may do this."""
        code = self._store.validate_for_update(
            parcel_id, ctx.caller, boundaries, description, area
        )
        if code is not None:
            logger.debug(
                "update_parcel %d by %s rejected: %s", parcel_id, ctx.caller, code.name
            )
            return RegistryResult.failure(code)

        self._store.apply_update(
            parcel_id, boundaries, description, area, updater=ctx.caller, now=ctx.block_height
        )
        logger.info("Parcel %d amended by %s at block %d", parcel_id, ctx.caller, ctx.block_height)
        self._record(
            ctx,
            "parcel.updated",
            f"parcel:{parcel_id}",
            {"boundaries": boundaries, "description": description, "area": area},
        )
        return RegistryResult.success(True)

    # -- Reads --

    def get_parcel(self, parcel_id: int) -> Parcel | None:
        return self._store.get(parcel_id)

    def get_parcel_update(self, parcel_id: int) -> ParcelUpdate | None:
        return self._store.get_update(parcel_id)

    def get_parcel_count(self) -> int:
        return self._store.count()

    def check_parcel_existence(self, geo_hash: bytes) -> bool:
        return self._store.exists(geo_hash)

    def is_verified_authority(self, identity: str) -> bool:
        return self._gate.is_verified(identity)

    def list_parcels(self) -> list[Parcel]:
        return self._store.list_parcels()

    @property
    def authority(self) -> str | None:
        return self._gate.authority

    @property
    def registration_fee(self) -> int:
        return self._fees.fee

    @property
    def max_parcels(self) -> int:
        return self._store.max_parcels

    @property
    def block_height(self) -> int:
        """Highest block height at which a mutation was committed."""
        return self._block_height

    # -- Snapshots --

    def state(self) -> RegistryState:
        return RegistryState(
            authority=self._gate.authority,
            registration_fee=self._fees.fee,
            next_parcel_id=self._store.count(),
            block_height=self._block_height,
        )

    def snapshot(self) -> RegistrySnapshot:
        return RegistrySnapshot(
            authority=self._gate.authority,
            registration_fee=self._fees.fee,
            block_height=self._block_height,
            store=self._store.snapshot(),
        )

    def restore(self, snapshot: RegistrySnapshot) -> None:
        """Load persisted state into a registry that has seen no mutations.

        The block height resumes from the later of the persisted height and
        the newest parcel or amendment timestamp, so stamps stay monotonic
        across restarts.

        Raises:
            ValueError: If this registry already holds state, or the snapshot
                is inconsistent.
        """
        if self._gate.is_configured or self._store.count() > 0:
            raise ValueError("Cannot restore a snapshot into a registry that already holds state")
        self._load(snapshot)
        logger.info(
            "Restored registry snapshot with %d parcels at block %d",
            snapshot.store.next_parcel_id,
            self._block_height,
        )

    def rollback(self, snapshot: RegistrySnapshot, ctx: LedgerContext, refund: int = 0) -> None:
        """Return to ``snapshot`` after a committed call could not be persisted.

        Args:
            snapshot: State taken before the failed call.
            ctx: Context of the failed call.
            refund: Fee collected from ``ctx.caller`` by that call, returned
                from the authority.

        Raises:
            ValueError: If the snapshot is inconsistent.
        """
        self._load(snapshot)
        if refund > 0 and not self._transfer.transfer(refund, self._gate.authority, ctx.caller):
            logger.error(
                "Refund of %d from %s to %s failed during rollback",
                refund, self._gate.authority, ctx.caller,
            )
        logger.warning(
            "Rolled back call by %s at block %d to %d parcels",
            ctx.caller, ctx.block_height, snapshot.store.next_parcel_id,
        )
        self._record(
            ctx,
            "registry.rolled_back",
            "registry",
            {"next_parcel_id": snapshot.store.next_parcel_id, "refund": refund},
        )

    def _load(self, snapshot: RegistrySnapshot) -> None:
        store = ParcelStore(max_parcels=self._store.max_parcels)
        store.restore(snapshot.store)
        gate = AuthorityGate(self._config.burn_identity, verifier=self._verifier)
        gate.restore(snapshot.authority)

        self._store = store
        self._gate = gate
        self._fees = FeePolicy(gate, initial_fee=snapshot.registration_fee)
        stamps = [p.timestamp for p in snapshot.store.parcels]
        stamps.extend(u.timestamp for u in snapshot.store.updates.values())
        self._block_height = max([snapshot.block_height, *stamps])

    def _record(
        self, ctx: LedgerContext, action: str, resource: str, details: dict
    ) -> None:
        self._block_height = max(self._block_height, ctx.block_height)
        if self._audit is None:
            return
        self._audit.log(
            AuditEvent(
                actor=ctx.caller,
                action=action,
                resource=resource,
                block_height=ctx.block_height,
                details=details,
            )
        )
