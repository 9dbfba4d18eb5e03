"""Tests for the verification log — append and newest-first queries."""

import pytest

from land_registry.lands.models import PropertyType
from land_registry.lands.service import LandService
from land_registry.verification.models import VerificationAction
from land_registry.verification.service import VerificationLogService


@pytest.fixture
def svc():
    return VerificationLogService()


@pytest.fixture
async def land_ids(db, users):
    lands = LandService()
    ids = []
    async with db.get_session() as session:
        for title in ("North", "South"):
            land = await lands.register(
                session, users["owner"].id,
                title=title, area=100, address=f"{title} Road",
                city="Capital City", state="IL",
                property_type=PropertyType.COMMERCIAL,
            )
            ids.append(land.id)
    return ids


class TestRecord:
    async def test_record(self, db, svc, users, land_ids):
        async with db.get_session() as session:
            log = await svc.record(
                session, land_ids[0], users["verifier"].id,
                VerificationAction.REJECTED, reason="Survey missing",
            )
        assert log.id is not None
        assert log.created_at is not None
        assert log.tx_hash is None

    async def test_rolled_back_with_unit_of_work(self, db, svc, users, land_ids):
        with pytest.raises(RuntimeError):
            async with db.get_session() as session:
                await svc.record(
                    session, land_ids[0], users["verifier"].id, VerificationAction.APPROVED
                )
                raise RuntimeError("abort")
        async with db.get_session() as session:
            assert await svc.for_land(session, land_ids[0]) == []


class TestQueries:
    async def test_newest_first(self, db, svc, users, land_ids):
        verifier_id = users["verifier"].id
        actions = [
            (land_ids[0], VerificationAction.APPROVED),
            (land_ids[1], VerificationAction.REJECTED),
            (land_ids[0], VerificationAction.APPROVED_TRANSFER),
            (land_ids[0], VerificationAction.REJECTED_TRANSFER),
        ]
        for land_id, action in actions:
            async with db.get_session() as session:
                await svc.record(session, land_id, verifier_id, action)

        async with db.get_session() as session:
            for_land = await svc.for_land(session, land_ids[0])
            for_verifier = await svc.for_verifier(session, verifier_id)
            other = await svc.for_verifier(session, users["admin"].id)

        assert [log.action for log in for_land] == [
            VerificationAction.REJECTED_TRANSFER,
            VerificationAction.APPROVED_TRANSFER,
            VerificationAction.APPROVED,
        ]
        assert [log.action for log in for_verifier] == [
            action for _, action in reversed(actions)
        ]
        assert other == []
