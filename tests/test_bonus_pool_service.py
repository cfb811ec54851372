"""Tests for the bonus pool factory."""

from decimal import Decimal

import pytest

from models import Agent, BonusAllocation, BonusPool
from commission_system.services.bonus_pool_service import BonusPoolService
from commission_system.repositories.allocation_ledger import AllocationLedger
from commission_system.exceptions import AgentNotFoundError, ClientNotApprovedError, ClientNotFoundError
from commission_system.events.event_bus import eventBus, CommissionEvents


class TestEnsureBonusPool:

    @pytest.mark.asyncio
    async def test_creates_and_distributes(self, session, make_chain, make_client):
        star2, closer = make_chain([2, 1])
        client = make_client(closer)

        pool = await BonusPoolService(session).ensureBonusPool(client.clientID)

        session.refresh(pool)
        assert pool.clientID == client.clientID
        assert pool.closerID == closer.agentID
        assert pool.totalAmount == Decimal("400")
        assert pool.directAmount == Decimal("200")
        assert pool.starPoolAmount == Decimal("200")
        assert pool.totalSlices == 4
        assert pool.sliceValue == Decimal("50")
        assert pool.status == "distributed"
        assert pool.recycledSlices == 1
        assert session.query(BonusAllocation).filter_by(bonusPoolID=pool.poolID).count() == 3

    @pytest.mark.asyncio
    async def test_second_call_returns_same_pool(self, session, make_agent, make_client):
        closer = make_agent(1)
        client = make_client(closer)
        service = BonusPoolService(session)

        first = await service.ensureBonusPool(client.clientID)
        second = await service.ensureBonusPool(client.clientID)

        assert first.poolID == second.poolID
        assert session.query(BonusPool).count() == 1
        assert session.query(BonusAllocation).count() == 2

    @pytest.mark.asyncio
    async def test_concurrent_creation_falls_back_to_existing(self, session, make_agent, make_client):
        closer = make_agent(1)
        client = make_client(closer)
        service = BonusPoolService(session)
        pool = await service.ensureBonusPool(client.clientID)

        # Simulate a request that passed the existence check before the pool was committed
        realFind = service.ledger.findPoolByClient
        calls = {"n": 0}

        async def staleFind(clientId):
            calls["n"] += 1
            if calls["n"] == 1:
                return None
            return await realFind(clientId)

        service.ledger.findPoolByClient = staleFind

        again = await service.ensureBonusPool(client.clientID)

        assert again.poolID == pool.poolID
        assert session.query(BonusPool).count() == 1
        assert session.query(BonusAllocation).count() == 2

    @pytest.mark.asyncio
    async def test_closer_rank_is_recalculated_after_distribution(self, session, make_agent, make_client):
        closer = make_agent(0)
        supervisor = make_agent(3)
        closer.supervisorID = supervisor.agentID
        session.commit()
        make_client(closer)
        make_client(closer)
        client = make_client(closer)

        pool = await BonusPoolService(session).ensureBonusPool(client.clientID)

        allocations = session.query(BonusAllocation).filter_by(bonusPoolID=pool.poolID).all()
        direct = [a for a in allocations if a.allocationType == "direct"][0]
        # Distribution used the rank held before this approval
        assert direct.starLevelAtTime == 0
        assert closer.agentID not in [a.agentID for a in allocations if a.allocationType == "star_slice"]

        stored = session.query(Agent).filter_by(agentID=closer.agentID).one()
        assert stored.tier == "1-star"
        assert stored.starLevel == 1
        # Ancestors are not recalculated by this event
        assert session.query(Agent).filter_by(agentID=supervisor.agentID).one().starLevel == 3

    @pytest.mark.asyncio
    async def test_rejects_unapproved_client(self, session, make_agent, make_client):
        closer = make_agent(1)
        client = make_client(closer, intakeStatus="pending")

        with pytest.raises(ClientNotApprovedError):
            await BonusPoolService(session).ensureBonusPool(client.clientID)

        assert session.query(BonusPool).count() == 0

    @pytest.mark.asyncio
    async def test_unknown_client(self, session):
        with pytest.raises(ClientNotFoundError):
            await BonusPoolService(session).ensureBonusPool(4242)

    @pytest.mark.asyncio
    async def test_failed_distribution_leaves_pending_pool(self, session, make_agent, make_client):
        closer = make_agent(2, supervisorID=9999)
        client = make_client(closer)
        service = BonusPoolService(session)

        with pytest.raises(AgentNotFoundError):
            await service.ensureBonusPool(client.clientID)

        pool = session.query(BonusPool).filter_by(clientID=client.clientID).one()
        assert pool.status == "pending"
        assert session.query(BonusAllocation).count() == 0

        # A retried approval returns the pending pool without creating another
        again = await service.ensureBonusPool(client.clientID)
        assert again.poolID == pool.poolID
        assert session.query(BonusPool).count() == 1

    @pytest.mark.asyncio
    async def test_pool_created_event(self, session, make_agent, make_client):
        received = []
        eventBus.subscribe(CommissionEvents.POOL_CREATED, received.append)
        closer = make_agent(0)
        client = make_client(closer)

        pool = await BonusPoolService(session).ensureBonusPool(client.clientID)

        assert received == [{"poolId": pool.poolID, "clientId": client.clientID, "closerId": closer.agentID}]


class TestAllocationLedger:

    @pytest.mark.asyncio
    async def test_unique_client_constraint(self, session, make_agent, make_client):
        closer = make_agent(0)
        client = make_client(closer)
        ledger = AllocationLedger(session)

        first, created = await ledger.createPool(client.clientID, closer.agentID)
        second, createdAgain = await ledger.createPool(client.clientID, closer.agentID)

        assert created is True
        assert createdAgain is False
        assert second.poolID == first.poolID
        assert session.query(BonusPool).count() == 1

    @pytest.mark.asyncio
    async def test_run_atomic_rolls_back_everything(self, session, make_agent, make_client):
        closer = make_agent(0)
        client = make_client(closer)
        ledger = AllocationLedger(session)
        pool, _ = await ledger.createPool(client.clientID, closer.agentID)

        def explode():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await ledger.runAtomic([
                lambda: ledger.createAllocation(pool.poolID, closer.agentID, "direct", 0, Decimal("200"), 0),
                lambda: ledger.updatePool(pool.poolID, {"status": "distributed"}),
                explode,
            ])

        assert session.query(BonusAllocation).count() == 0
        assert session.query(BonusPool).one().status == "pending"
