"""Transaction lifecycle engine — purchases and ownership transfers.

A purchase moves the land to ``transfer_pending`` and opens a ``pending``
transaction; while that transaction is open the land cannot be listed,
un-listed or purchased again. A verifier then completes or rejects the
transfer, which releases the land back to ``verified``.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from land_registry.common.exceptions import (
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from land_registry.common.models import utcnow
from land_registry.common.receipts import generate_tx_hash
from land_registry.lands.models import LandStatus
from land_registry.storage import RegistryStore
from land_registry.transactions.models import TransactionModel, TransactionStatus
from land_registry.verification.models import VerificationAction, VerificationLogModel
from land_registry.verification.service import VerificationLogService

logger = logging.getLogger(__name__)


class TransactionService:
    """Purchase and transfer operations."""

    def __init__(self, verification_log: VerificationLogService | None = None):
        self.verification_log = verification_log or VerificationLogService()

    # ── Purchase ──

    async def initiate_purchase(
        self,
        session: AsyncSession,
        buyer_id: int,
        land_id: int,
        offered_price: int,
    ) -> TransactionModel:
        """Open a pending transaction for a listed, verified land.

        The offered price must equal the listing exactly.
        """
        store = RegistryStore(session)
        land = await store.get_land(land_id, for_update=True)
        if land is None:
            raise NotFoundError("Land not found")
        if not land.is_for_sale:
            raise ValidationError("Land is not for sale")
        if land.status != LandStatus.VERIFIED:
            raise InvalidStateError("Only verified lands can be purchased")
        if land.price != offered_price:
            raise ValidationError("Price does not match the listing")
        if land.owner_id == buyer_id:
            raise ValidationError("You already own this land")

        seller_id = land.owner_id
        # is_for_sale is left as listed: a rejected transfer returns the land
        # to verified with its listing intact. The status alone keeps it off
        # the marketplace while the transfer is pending.
        if not await store.transition_land(
            land, LandStatus.VERIFIED, status=LandStatus.TRANSFER_PENDING
        ):
            raise InvalidStateError("Only verified lands can be purchased")

        transaction = await store.add_transaction(TransactionModel(
            land_id=land.id,
            from_user_id=seller_id,
            to_user_id=buyer_id,
            price=offered_price,
            status=TransactionStatus.PENDING,
            escrow_id=None,
        ))
        logger.info(
            "purchase initiated",
            extra={
                "transaction_id": transaction.id,
                "land_id": land.id,
                "buyer_id": buyer_id,
                "seller_id": seller_id,
            },
        )
        return transaction

    # ── Transfer decision ──

    async def decide_transfer(
        self,
        session: AsyncSession,
        transaction_id: int,
        verifier_id: int,
        approve: bool,
        reason: str | None = None,
        tx_hash: str | None = None,
    ) -> tuple[TransactionModel, VerificationLogModel]:
        """Complete or reject a pending transfer.

        Approval hands the land to the buyer and takes it off the market.
        Rejection returns the land to ``verified`` with owner and sale flag
        untouched, so a listed land is immediately purchasable again.
        """
        store = RegistryStore(session)
        transaction = await store.get_transaction(transaction_id, for_update=True)
        if transaction is None:
            raise NotFoundError("Transaction not found")
        if transaction.status != TransactionStatus.PENDING:
            raise InvalidStateError("Transaction is not pending")

        land = await store.get_land(transaction.land_id, for_update=True)
        if land is None:
            raise NotFoundError("Land not found")

        if approve and not tx_hash:
            tx_hash = generate_tx_hash()

        tx_values = {
            "status": TransactionStatus.COMPLETED if approve else TransactionStatus.REJECTED,
            "verifier_id": verifier_id,
            "verified_at": utcnow(),
        }
        if tx_hash:
            tx_values["tx_hash"] = tx_hash
        if not await store.transition_transaction(
            transaction, TransactionStatus.PENDING, **tx_values
        ):
            raise InvalidStateError("Transaction is not pending")

        if approve:
            land_values = {
                "owner_id": transaction.to_user_id,
                "is_for_sale": False,
                "status": LandStatus.VERIFIED,
            }
        else:
            land_values = {"status": LandStatus.VERIFIED}
        if not await store.transition_land(
            land, LandStatus.TRANSFER_PENDING, **land_values
        ):
            raise InvalidStateError("Land is not awaiting a transfer")

        log = await self.verification_log.record(
            session,
            land_id=land.id,
            verifier_id=verifier_id,
            action=(
                VerificationAction.APPROVED_TRANSFER
                if approve
                else VerificationAction.REJECTED_TRANSFER
            ),
            reason=reason,
            tx_hash=tx_hash,
        )
        logger.info(
            "transfer decided",
            extra={
                "transaction_id": transaction.id,
                "land_id": land.id,
                "verifier_id": verifier_id,
                "approved": approve,
            },
        )
        return transaction, log

    # ── Reads ──

    async def get_transaction(
        self, session: AsyncSession, transaction_id: int
    ) -> TransactionModel:
        transaction = await RegistryStore(session).get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError("Transaction not found")
        return transaction

    async def transactions_for_user(
        self, session: AsyncSession, user_id: int
    ) -> list[TransactionModel]:
        """Transactions where the user is buyer or seller."""
        return await RegistryStore(session).transactions_by_user(user_id)

    async def pending(self, session: AsyncSession) -> list[TransactionModel]:
        return await RegistryStore(session).transactions_by_status(
            TransactionStatus.PENDING
        )
