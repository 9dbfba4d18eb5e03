"""Verification log recorder — append-only trail of verifier decisions."""

from sqlalchemy.ext.asyncio import AsyncSession

from land_registry.storage import RegistryStore
from land_registry.verification.models import VerificationAction, VerificationLogModel


class VerificationLogService:
    """Records and queries verifier decisions.

    There is no update or delete: entries are written only as part of a
    land or transfer decision and never change afterwards.
    """

    # ── Write ──

    async def record(
        self,
        session: AsyncSession,
        land_id: int,
        verifier_id: int,
        action: VerificationAction,
        reason: str | None = None,
        tx_hash: str | None = None,
    ) -> VerificationLogModel:
        """Append an entry in the caller's unit of work."""
        log = VerificationLogModel(
            land_id=land_id,
            verifier_id=verifier_id,
            action=action,
            reason=reason,
            tx_hash=tx_hash,
        )
        return await RegistryStore(session).add_log(log)

    # ── Read ──

    async def for_land(
        self, session: AsyncSession, land_id: int
    ) -> list[VerificationLogModel]:
        """Full history of a land, newest first."""
        return await RegistryStore(session).logs_by_land(land_id)

    async def for_verifier(
        self, session: AsyncSession, verifier_id: int
    ) -> list[VerificationLogModel]:
        """One verifier's activity, newest first."""
        return await RegistryStore(session).logs_by_verifier(verifier_id)
