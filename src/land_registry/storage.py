"""Storage interface over the four registry collections.

``RegistryStore`` wraps one ``AsyncSession`` (one unit of work) and exposes
the narrow set of lookups, filters and mutations the lifecycle engines need.
Status changes go through ``transition_land`` / ``transition_transaction``,
which are conditional updates: they only apply when the row still holds the
expected status and version, and report whether they did.
"""

import logging
from typing import Any

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from land_registry.lands.models import LandModel, LandStatus
from land_registry.transactions.models import TransactionModel, TransactionStatus
from land_registry.users.models import UserModel, UserRole
from land_registry.verification.models import VerificationLogModel

logger = logging.getLogger(__name__)


class RegistryStore:
    """Persistence contract for users, lands, transactions and verification logs."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ── Users ──

    async def add_user(self, user: UserModel) -> UserModel:
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_user(self, user_id: int) -> UserModel | None:
        return await self.session.get(UserModel, user_id)

    async def get_user_by_username(self, username: str) -> UserModel | None:
        result = await self.session.execute(
            select(UserModel).where(func.lower(UserModel.username) == username.lower())
        )
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> UserModel | None:
        result = await self.session.execute(
            select(UserModel).where(func.lower(UserModel.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def list_users(self, role: UserRole | None = None) -> list[UserModel]:
        query = select(UserModel)
        if role is not None:
            query = query.where(UserModel.role == role)
        result = await self.session.execute(query.order_by(UserModel.id))
        return list(result.scalars().all())

    # ── Lands ──

    async def add_land(self, land: LandModel) -> LandModel:
        self.session.add(land)
        await self.session.flush()
        return land

    async def get_land(self, land_id: int, for_update: bool = False) -> LandModel | None:
        query = select(LandModel).where(LandModel.id == land_id)
        if for_update:
            # Row lock where the backend supports it; ignored on SQLite.
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def lands_by_owner(self, owner_id: int) -> list[LandModel]:
        result = await self.session.execute(
            select(LandModel).where(LandModel.owner_id == owner_id).order_by(LandModel.id)
        )
        return list(result.scalars().all())

    async def lands_by_status(self, status: LandStatus) -> list[LandModel]:
        result = await self.session.execute(
            select(LandModel).where(LandModel.status == status).order_by(LandModel.id)
        )
        return list(result.scalars().all())

    async def lands_for_sale(self) -> list[LandModel]:
        result = await self.session.execute(
            select(LandModel)
            .where(
                LandModel.status == LandStatus.VERIFIED,
                LandModel.is_for_sale.is_(True),
            )
            .order_by(LandModel.id)
        )
        return list(result.scalars().all())

    async def transition_land(
        self,
        land: LandModel,
        expected_status: LandStatus,
        **values: Any,
    ) -> bool:
        """Apply ``values`` to ``land`` if it is still in ``expected_status``.

        The check and the write are a single UPDATE keyed on the status and
        the version the caller read, so a concurrent writer that got there
        first makes this return False instead of overwriting its result.
        """
        result = await self.session.execute(
            update(LandModel)
            .where(
                LandModel.id == land.id,
                LandModel.status == expected_status,
                LandModel.version == land.version,
            )
            .values(version=LandModel.version + 1, **values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            logger.warning(
                "land transition lost",
                extra={"land_id": land.id, "expected_status": expected_status.value},
            )
            return False
        await self.session.refresh(land)
        return True

    # ── Transactions ──

    async def add_transaction(self, transaction: TransactionModel) -> TransactionModel:
        self.session.add(transaction)
        await self.session.flush()
        return transaction

    async def get_transaction(
        self, transaction_id: int, for_update: bool = False
    ) -> TransactionModel | None:
        query = select(TransactionModel).where(TransactionModel.id == transaction_id)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def transactions_by_user(self, user_id: int) -> list[TransactionModel]:
        result = await self.session.execute(
            select(TransactionModel)
            .where(
                or_(
                    TransactionModel.from_user_id == user_id,
                    TransactionModel.to_user_id == user_id,
                )
            )
            .order_by(TransactionModel.id)
        )
        return list(result.scalars().all())

    async def transactions_by_status(
        self, status: TransactionStatus
    ) -> list[TransactionModel]:
        result = await self.session.execute(
            select(TransactionModel)
            .where(TransactionModel.status == status)
            .order_by(TransactionModel.id)
        )
        return list(result.scalars().all())

    async def transactions_for_land(
        self, land_id: int, status: TransactionStatus | None = None
    ) -> list[TransactionModel]:
        query = select(TransactionModel).where(TransactionModel.land_id == land_id)
        if status is not None:
            query = query.where(TransactionModel.status == status)
        result = await self.session.execute(query.order_by(TransactionModel.id))
        return list(result.scalars().all())

    async def transition_transaction(
        self,
        transaction: TransactionModel,
        expected_status: TransactionStatus,
        **values: Any,
    ) -> bool:
        """Conditional status write for a transaction; see ``transition_land``."""
        result = await self.session.execute(
            update(TransactionModel)
            .where(
                TransactionModel.id == transaction.id,
                TransactionModel.status == expected_status,
                TransactionModel.version == transaction.version,
            )
            .values(version=TransactionModel.version + 1, **values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            logger.warning(
                "transaction transition lost",
                extra={
                    "transaction_id": transaction.id,
                    "expected_status": expected_status.value,
                },
            )
            return False
        await self.session.refresh(transaction)
        return True

    # ── Verification logs ──

    async def add_log(self, log: VerificationLogModel) -> VerificationLogModel:
        self.session.add(log)
        await self.session.flush()
        return log

    async def logs_by_land(self, land_id: int) -> list[VerificationLogModel]:
        result = await self.session.execute(
            select(VerificationLogModel)
            .where(VerificationLogModel.land_id == land_id)
            .order_by(VerificationLogModel.created_at.desc(), VerificationLogModel.id.desc())
        )
        return list(result.scalars().all())

    async def logs_by_verifier(self, verifier_id: int) -> list[VerificationLogModel]:
        result = await self.session.execute(
            select(VerificationLogModel)
            .where(VerificationLogModel.verifier_id == verifier_id)
            .order_by(VerificationLogModel.created_at.desc(), VerificationLogModel.id.desc())
        )
        return list(result.scalars().all())

    # ── Counts ──

    async def count_users(self, role: UserRole | None = None) -> int:
        query = select(func.count(UserModel.id))
        if role is not None:
            query = query.where(UserModel.role == role)
        return (await self.session.execute(query)).scalar() or 0

    async def count_lands(self, status: LandStatus | None = None) -> int:
        query = select(func.count(LandModel.id))
        if status is not None:
            query = query.where(LandModel.status == status)
        return (await self.session.execute(query)).scalar() or 0

    async def count_transactions(self, status: TransactionStatus | None = None) -> int:
        query = select(func.count(TransactionModel.id))
        if status is not None:
            query = query.where(TransactionModel.status == status)
        return (await self.session.execute(query)).scalar() or 0
