"""Tests for the transaction lifecycle — purchase, transfer, atomicity, races."""

import asyncio

import pytest

from land_registry.common.exceptions import (
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from land_registry.lands.models import LandStatus, PropertyType
from land_registry.lands.service import LandService
from land_registry.storage import RegistryStore
from land_registry.transactions.models import TransactionModel, TransactionStatus
from land_registry.transactions.service import TransactionService
from land_registry.verification.models import VerificationAction
from land_registry.verification.service import VerificationLogService

PRICE = 1000


@pytest.fixture
def log_svc():
    return VerificationLogService()


@pytest.fixture
def lands(log_svc):
    return LandService(verification_log=log_svc)


@pytest.fixture
def svc(log_svc):
    return TransactionService(verification_log=log_svc)


@pytest.fixture
async def listed_land(db, users, lands):
    """A verified land owned by ``owner`` and listed at ``PRICE``."""
    async with db.get_session() as session:
        land = await lands.register(
            session, users["owner"].id,
            title="Orchard", area=20000, address="3 Orchard Lane",
            city="Ogdenville", state="IL",
            property_type=PropertyType.AGRICULTURAL,
        )
    async with db.get_session() as session:
        await lands.decide_verification(session, land.id, users["verifier"].id, approve=True)
    async with db.get_session() as session:
        return await lands.set_for_sale(session, land.id, users["owner"].id, True, price=PRICE)


async def assert_invariants(db):
    async with db.get_session() as session:
        store = RegistryStore(session)
        for status in LandStatus:
            for land in await store.lands_by_status(status):
                pending = await store.transactions_for_land(
                    land.id, TransactionStatus.PENDING
                )
                if land.status == LandStatus.TRANSFER_PENDING:
                    assert len(pending) == 1
                else:
                    assert pending == []
                    if land.is_for_sale:
                        assert land.status == LandStatus.VERIFIED
                for tx in await store.transactions_for_land(land.id):
                    assert tx.price > 0


async def _purchase(db, svc, buyer_id, land_id, price=PRICE):
    async with db.get_session() as session:
        return await svc.initiate_purchase(session, buyer_id, land_id, price)


class TestScenario:
    async def test_register_verify_list_buy_transfer(
        self, db, users, lands, svc, log_svc, listed_land
    ):
        owner, buyer, verifier = users["owner"], users["buyer"], users["verifier"]
        await assert_invariants(db)

        tx = await _purchase(db, svc, buyer.id, listed_land.id)
        assert tx.status == TransactionStatus.PENDING
        assert tx.from_user_id == owner.id
        assert tx.to_user_id == buyer.id
        assert tx.price == PRICE
        assert tx.escrow_id is None
        async with db.get_session() as session:
            land = await lands.get_land(session, listed_land.id)
        assert land.status == LandStatus.TRANSFER_PENDING
        await assert_invariants(db)

        async with db.get_session() as session:
            tx, log = await svc.decide_transfer(session, tx.id, verifier.id, approve=True)
        assert tx.status == TransactionStatus.COMPLETED
        assert tx.verifier_id == verifier.id
        assert tx.verified_at is not None
        assert tx.tx_hash.startswith("0x")
        assert log.action == VerificationAction.APPROVED_TRANSFER
        assert log.tx_hash == tx.tx_hash

        async with db.get_session() as session:
            land = await lands.get_land(session, listed_land.id)
            history = await log_svc.for_land(session, land.id)
        assert land.owner_id == buyer.id
        assert land.is_for_sale is False
        assert land.status == LandStatus.VERIFIED
        assert [entry.action for entry in history] == [
            VerificationAction.APPROVED_TRANSFER,
            VerificationAction.APPROVED,
        ]
        await assert_invariants(db)

    async def test_rejected_transfer_keeps_listing(
        self, db, users, lands, svc, listed_land
    ):
        tx = await _purchase(db, svc, users["buyer"].id, listed_land.id)
        async with db.get_session() as session:
            tx, log = await svc.decide_transfer(
                session, tx.id, users["verifier"].id,
                approve=False, reason="Buyer KYC failed",
            )
        assert tx.status == TransactionStatus.REJECTED
        assert tx.tx_hash is None
        assert log.action == VerificationAction.REJECTED_TRANSFER
        assert log.reason == "Buyer KYC failed"

        async with db.get_session() as session:
            land = await lands.get_land(session, listed_land.id)
        assert land.status == LandStatus.VERIFIED
        assert land.owner_id == users["owner"].id
        assert land.is_for_sale is True
        await assert_invariants(db)

        # Immediately purchasable again at the same price.
        again = await _purchase(db, svc, users["buyer2"].id, listed_land.id)
        assert again.status == TransactionStatus.PENDING


class TestInitiatePurchase:
    async def test_price_mismatch(self, db, users, svc, listed_land):
        with pytest.raises(ValidationError):
            await _purchase(db, svc, users["buyer"].id, listed_land.id, price=PRICE - 1)
        async with db.get_session() as session:
            assert await svc.transactions_for_user(session, users["buyer"].id) == []

    async def test_not_for_sale_creates_nothing(self, db, users, lands, svc, listed_land):
        async with db.get_session() as session:
            await lands.set_for_sale(session, listed_land.id, users["owner"].id, False)
        with pytest.raises(ValidationError):
            await _purchase(db, svc, users["buyer"].id, listed_land.id)
        async with db.get_session() as session:
            assert await RegistryStore(session).count_transactions() == 0
            land = await lands.get_land(session, listed_land.id)
        assert land.status == LandStatus.VERIFIED

    async def test_unknown_land(self, db, users, svc):
        with pytest.raises(NotFoundError):
            await _purchase(db, svc, users["buyer"].id, 999)

    async def test_owner_cannot_buy_own_land(self, db, users, svc, listed_land):
        with pytest.raises(ValidationError):
            await _purchase(db, svc, users["owner"].id, listed_land.id)

    async def test_pending_transfer_locks_land(self, db, users, lands, svc, listed_land):
        await _purchase(db, svc, users["buyer"].id, listed_land.id)

        with pytest.raises(InvalidStateError):
            await _purchase(db, svc, users["buyer2"].id, listed_land.id)
        with pytest.raises(InvalidStateError):
            async with db.get_session() as session:
                await lands.set_for_sale(
                    session, listed_land.id, users["owner"].id, True, price=PRICE
                )
        with pytest.raises(InvalidStateError):
            async with db.get_session() as session:
                await lands.set_for_sale(
                    session, listed_land.id, users["owner"].id, False
                )
        await assert_invariants(db)

    async def test_concurrent_purchases_yield_one_transaction(
        self, db, users, svc, listed_land
    ):
        results = await asyncio.gather(
            _purchase(db, svc, users["buyer"].id, listed_land.id),
            _purchase(db, svc, users["buyer2"].id, listed_land.id),
            return_exceptions=True,
        )
        won = [r for r in results if isinstance(r, TransactionModel)]
        lost = [r for r in results if isinstance(r, InvalidStateError)]
        assert len(won) == 1
        assert len(lost) == 1

        async with db.get_session() as session:
            pending = await svc.pending(session)
        assert [tx.id for tx in pending] == [won[0].id]
        await assert_invariants(db)


class TestDecideTransfer:
    async def test_terminal_transaction_refused(self, db, users, svc, listed_land):
        tx = await _purchase(db, svc, users["buyer"].id, listed_land.id)
        async with db.get_session() as session:
            await svc.decide_transfer(session, tx.id, users["verifier"].id, approve=True)

        for approve in (True, False):
            with pytest.raises(InvalidStateError):
                async with db.get_session() as session:
                    await svc.decide_transfer(
                        session, tx.id, users["verifier"].id, approve=approve
                    )

        async with db.get_session() as session:
            tx = await svc.get_transaction(session, tx.id)
        assert tx.status == TransactionStatus.COMPLETED

    async def test_unknown_transaction(self, db, users, svc):
        with pytest.raises(NotFoundError):
            async with db.get_session() as session:
                await svc.decide_transfer(session, 42, users["verifier"].id, approve=True)

    async def test_failure_rolls_back_every_write(
        self, db, users, lands, svc, log_svc, listed_land, monkeypatch
    ):
        tx = await _purchase(db, svc, users["buyer"].id, listed_land.id)

        async def crash(*args, **kwargs):
            raise RuntimeError("disk full")

        monkeypatch.setattr(log_svc, "record", crash)
        with pytest.raises(RuntimeError):
            async with db.get_session() as session:
                await svc.decide_transfer(session, tx.id, users["verifier"].id, approve=True)
        monkeypatch.undo()

        async with db.get_session() as session:
            land = await lands.get_land(session, listed_land.id)
            reloaded = await svc.get_transaction(session, tx.id)
            history = await log_svc.for_land(session, land.id)
        assert land.owner_id == users["owner"].id
        assert land.status == LandStatus.TRANSFER_PENDING
        assert land.is_for_sale is True
        assert reloaded.status == TransactionStatus.PENDING
        assert reloaded.verifier_id is None
        assert [entry.action for entry in history] == [VerificationAction.APPROVED]
        await assert_invariants(db)

        # The same decision succeeds once the failure is gone.
        async with db.get_session() as session:
            tx, _ = await svc.decide_transfer(session, tx.id, users["verifier"].id, approve=True)
        assert tx.status == TransactionStatus.COMPLETED


class TestReads:
    async def test_transactions_for_user(self, db, users, svc, listed_land):
        tx = await _purchase(db, svc, users["buyer"].id, listed_land.id)
        async with db.get_session() as session:
            assert [t.id for t in await svc.transactions_for_user(session, users["owner"].id)] == [tx.id]
            assert [t.id for t in await svc.transactions_for_user(session, users["buyer"].id)] == [tx.id]
            assert await svc.transactions_for_user(session, users["buyer2"].id) == []

    async def test_get_missing_transaction(self, db, svc):
        with pytest.raises(NotFoundError):
            async with db.get_session() as session:
                await svc.get_transaction(session, 7)
