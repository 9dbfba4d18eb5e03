"""Land lifecycle engine — registration, verification, sale listing.

Status machine::

    pending ──approve──▶ verified ──purchase──▶ transfer_pending
       │                    ▲                          │
       └──reject──▶ rejected └───transfer decided──────┘

``is_for_sale`` may only be true while the land is verified. Purchase and
transfer transitions live in the transaction engine.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from land_registry.common.exceptions import (
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from land_registry.common.receipts import generate_tx_hash
from land_registry.lands.models import LandModel, LandStatus
from land_registry.storage import RegistryStore
from land_registry.verification.models import VerificationAction, VerificationLogModel
from land_registry.verification.service import VerificationLogService

logger = logging.getLogger(__name__)

_REGISTRATION_FIELDS = (
    "title", "description", "area", "address", "city", "state", "postal_code",
    "property_type", "year_built", "location", "documents", "price",
)


class LandService:
    """Land lifecycle operations."""

    def __init__(self, verification_log: VerificationLogService | None = None):
        self.verification_log = verification_log or VerificationLogService()

    # ── Registration ──

    async def register(
        self, session: AsyncSession, owner_id: int, **details: Any
    ) -> LandModel:
        """Create a land record for ``owner_id``.

        Status, sale flag and token id are forced regardless of ``details``.
        """
        if not details.get("area") or details["area"] <= 0:
            raise ValidationError("Area must be greater than zero")
        if not (details.get("address") or "").strip():
            raise ValidationError("Address is required")

        fields = {k: details[k] for k in _REGISTRATION_FIELDS if k in details}
        fields.setdefault("documents", [])
        land = LandModel(
            **fields,
            owner_id=owner_id,
            status=LandStatus.PENDING,
            is_for_sale=False,
            token_id=None,
        )
        await RegistryStore(session).add_land(land)
        logger.info(
            "land registered", extra={"land_id": land.id, "owner_id": owner_id}
        )
        return land

    # ── Reads ──

    async def get_land(self, session: AsyncSession, land_id: int) -> LandModel:
        land = await RegistryStore(session).get_land(land_id)
        if land is None:
            raise NotFoundError("Land not found")
        return land

    async def lands_by_owner(
        self, session: AsyncSession, owner_id: int
    ) -> list[LandModel]:
        return await RegistryStore(session).lands_by_owner(owner_id)

    async def lands_by_status(
        self, session: AsyncSession, status: LandStatus
    ) -> list[LandModel]:
        return await RegistryStore(session).lands_by_status(status)

    async def list_for_sale(self, session: AsyncSession) -> list[LandModel]:
        """Marketplace: verified lands currently listed for sale."""
        return await RegistryStore(session).lands_for_sale()

    # ── Verification ──

    async def decide_verification(
        self,
        session: AsyncSession,
        land_id: int,
        verifier_id: int,
        approve: bool,
        reason: str | None = None,
        tx_hash: str | None = None,
    ) -> tuple[LandModel, VerificationLogModel]:
        """Approve or reject a pending registration.

        The status change and its log entry are written in the caller's unit
        of work; returns both.
        """
        store = RegistryStore(session)
        land = await store.get_land(land_id, for_update=True)
        if land is None:
            raise NotFoundError("Land not found")
        if land.status != LandStatus.PENDING:
            logger.warning(
                "verification refused",
                extra={"land_id": land_id, "status": land.status.value},
            )
            raise InvalidStateError(
                f"Land is {land.status.value}; only pending lands can be verified"
            )

        new_status = LandStatus.VERIFIED if approve else LandStatus.REJECTED
        if approve and not tx_hash:
            tx_hash = generate_tx_hash()

        if not await store.transition_land(land, LandStatus.PENDING, status=new_status):
            raise InvalidStateError("Land status changed concurrently")

        log = await self.verification_log.record(
            session,
            land_id=land.id,
            verifier_id=verifier_id,
            action=VerificationAction.APPROVED if approve else VerificationAction.REJECTED,
            reason=reason,
            tx_hash=tx_hash,
        )
        logger.info(
            "land verification decided",
            extra={
                "land_id": land.id,
                "verifier_id": verifier_id,
                "new_status": new_status.value,
            },
        )
        return land, log

    # ── Sale listing ──

    async def set_for_sale(
        self,
        session: AsyncSession,
        land_id: int,
        owner_id: int,
        is_for_sale: bool,
        price: int | None = None,
    ) -> LandModel:
        """List or un-list a land. Only ``is_for_sale`` and ``price`` change."""
        if is_for_sale and price is None:
            raise ValidationError("Valid price is required when listing for sale")
        if price is not None and price <= 0:
            raise ValidationError("Price must be greater than zero")

        store = RegistryStore(session)
        land = await store.get_land(land_id, for_update=True)
        if land is None:
            raise NotFoundError("Land not found")
        if land.owner_id != owner_id:
            raise ForbiddenError("You do not own this land")
        if is_for_sale and land.status != LandStatus.VERIFIED:
            raise InvalidStateError("Can only list verified lands for sale")
        if land.status == LandStatus.TRANSFER_PENDING:
            raise InvalidStateError("Land has a pending transfer")

        values: dict[str, Any] = {"is_for_sale": is_for_sale}
        if price is not None:
            values["price"] = price
        if not await store.transition_land(land, land.status, **values):
            raise InvalidStateError("Land status changed concurrently")

        logger.info(
            "land sale listing updated",
            extra={"land_id": land.id, "is_for_sale": is_for_sale, "price": land.price},
        )
        return land
