"""Dependency injection singletons for the land registry."""

from land_registry.common.config import get_settings
from land_registry.common.database import DatabaseManager
from land_registry.lands.service import LandService
from land_registry.system.service import StatsService
from land_registry.transactions.service import TransactionService
from land_registry.users.service import UserService
from land_registry.verification.service import VerificationLogService

_db: DatabaseManager | None = None
_verification_log: VerificationLogService | None = None
_lands: LandService | None = None
_transactions: TransactionService | None = None
_users: UserService | None = None
_stats: StatsService | None = None


def get_db() -> DatabaseManager:
    global _db
    if _db is None:
        _db = DatabaseManager(get_settings())
    return _db


def get_verification_log_service() -> VerificationLogService:
    global _verification_log
    if _verification_log is None:
        _verification_log = VerificationLogService()
    return _verification_log


def get_land_service() -> LandService:
    global _lands
    if _lands is None:
        _lands = LandService(verification_log=get_verification_log_service())
    return _lands


def get_transaction_service() -> TransactionService:
    global _transactions
    if _transactions is None:
        _transactions = TransactionService(
            verification_log=get_verification_log_service(),
        )
    return _transactions


def get_user_service() -> UserService:
    global _users
    if _users is None:
        _users = UserService()
    return _users


def get_stats_service() -> StatsService:
    global _stats
    if _stats is None:
        _stats = StatsService()
    return _stats


def reset_singletons() -> None:
    """Reset all singletons (for testing)."""
    global _db, _verification_log, _lands, _transactions, _users, _stats
    _db = None
    _verification_log = None
    _lands = None
    _transactions = None
    _users = None
    _stats = None
