"""Aggregate registry counts for the admin overview."""

from sqlalchemy.ext.asyncio import AsyncSession

from land_registry.lands.models import LandStatus
from land_registry.storage import RegistryStore
from land_registry.transactions.models import TransactionStatus
from land_registry.users.models import UserRole


class StatsService:

    async def get_stats(self, session: AsyncSession) -> dict[str, int]:
        store = RegistryStore(session)
        return {
            "user_count": await store.count_users(),
            "verifier_count": await store.count_users(UserRole.VERIFIER),
            "land_count": await store.count_lands(),
            "pending_registrations": await store.count_lands(LandStatus.PENDING),
            "pending_transfers": await store.count_lands(LandStatus.TRANSFER_PENDING),
            "verified_lands": await store.count_lands(LandStatus.VERIFIED),
            "transaction_count": await store.count_transactions(),
            "completed_transactions": await store.count_transactions(
                TransactionStatus.COMPLETED
            ),
        }
