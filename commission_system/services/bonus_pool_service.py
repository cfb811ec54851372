# commission_system/services/bonus_pool_service.py
"""
Bonus pool factory - one pool per approved client.
"""
from typing import Optional
from sqlalchemy.orm import Session
import logging

from models import BonusPool
from commission_system.config.ranks import APPROVED_INTAKE_STATUS
from commission_system.repositories.agent_directory import AgentDirectory
from commission_system.repositories.allocation_ledger import AllocationLedger
from commission_system.services.distribution_service import DistributionService
from commission_system.services.rank_service import RankService
from commission_system.exceptions import ClientNotApprovedError
from commission_system.events.event_bus import eventBus

logger = logging.getLogger(__name__)


class BonusPoolService:
    """Creates bonus pools for approved clients and triggers distribution."""

    def __init__(
            self,
            session: Session,
            directory: Optional[AgentDirectory] = None,
            ledger: Optional[AllocationLedger] = None
    ):
        self.session = session
        self.directory = directory or AgentDirectory(session)
        self.ledger = ledger or AllocationLedger(session)
        self.distributionService = DistributionService(session, self.directory, self.ledger)
        self.rankService = RankService(session, self.directory)

    async def ensureBonusPool(self, clientId: int) -> BonusPool:
        """
        Return the client's bonus pool, creating and distributing it on
        first call. Repeated calls return the same pool unchanged.

        If distribution or the rank update fails the pool stays pending
        and the error propagates; distribute() can be retried later.
        """
        existing = await self.ledger.findPoolByClient(clientId)
        if existing:
            logger.info(f"Bonus pool {existing.poolID} already exists for client {clientId}")
            return existing

        client = await self.directory.getClient(clientId)
        if client.intakeStatus != APPROVED_INTAKE_STATUS:
            raise ClientNotApprovedError(clientId, client.intakeStatus)

        closer = await self.directory.getAgent(client.agentID)

        pool, created = await self.ledger.createPool(clientId, closer.agentID)
        if not created:
            return pool

        logger.info(
            f"Created bonus pool {pool.poolID} for client {clientId}, "
            f"closer {closer.agentID} ({closer.tier})"
        )
        await eventBus.poolCreated(pool)

        await self.distributionService.distribute(pool.poolID)

        # The new approval may promote the closer; ancestors are not recomputed
        await self.rankService.recalculateRank(closer.agentID)

        return pool
