# commission_system/services/distribution_service.py
"""
Star pool distribution.

Every approved client funds a 400 pool: 200 goes straight to the closer,
the other 200 is cut into 4 slices of 50. Slices are claimed bottom-up,
starting with the closer and walking supervisor links. Each agent claims
min(starLevel, remaining). Slices left when the chain runs out are
recycled, i.e. paid to nobody.
"""
from datetime import datetime, timezone
from functools import partial
from typing import Dict, List, Optional
from sqlalchemy.orm import Session
import logging

import config
from models import Agent, BonusPool
from commission_system.config.ranks import AllocationType, PoolStatus
from commission_system.repositories.agent_directory import AgentDirectory
from commission_system.repositories.allocation_ledger import AllocationLedger
from commission_system.exceptions import HierarchyCycleError, PoolAlreadyDistributedError
from commission_system.events.event_bus import eventBus

logger = logging.getLogger(__name__)


class DistributionService:
    """Service for splitting a bonus pool across the closer's reporting chain."""

    def __init__(
            self,
            session: Session,
            directory: Optional[AgentDirectory] = None,
            ledger: Optional[AllocationLedger] = None
    ):
        self.session = session
        self.directory = directory or AgentDirectory(session)
        self.ledger = ledger or AllocationLedger(session)

    async def distribute(self, poolId: int) -> None:
        """
        Distribute a pending pool. Already distributed pools are left
        untouched. Allocations and the pool update are committed as one
        batch; on any failure the pool stays pending.

        The status read below is only an early exit. The batch opens with a
        pending -> distributed UPDATE filtered on status, so when two workers
        race on the same pool only one of them matches the row; the other
        rolls back its allocations and returns.
        """
        pool = await self.ledger.getPool(poolId)

        if pool.status == PoolStatus.DISTRIBUTED:
            logger.info(f"Bonus pool {poolId} already distributed, skipping")
            return

        closer = await self.directory.getAgent(pool.closerID)
        plan = await self.planDistribution(pool, closer)

        operations = [partial(self.ledger.updatePool, poolId, {
            "status": PoolStatus.DISTRIBUTED,
            "distributedSlices": plan["distributedSlices"],
            "recycledSlices": plan["recycledSlices"],
            "hierarchySnapshot": plan["hierarchySnapshot"],
            "distributedAt": datetime.now(timezone.utc)
        }, expectedStatus=PoolStatus.PENDING)]
        operations.extend(
            partial(
                self.ledger.createAllocation,
                poolId,
                allocation["agentId"],
                allocation["type"],
                allocation["slices"],
                allocation["amount"],
                allocation["starLevelAtTime"]
            )
            for allocation in plan["allocations"]
        )

        try:
            await self.ledger.runAtomic(operations)
        except PoolAlreadyDistributedError:
            logger.info(f"Bonus pool {poolId} was distributed concurrently, skipping")
            return

        logger.info(
            f"Distributed bonus pool {poolId}: "
            f"{len(plan['allocations'])} allocations, "
            f"{plan['distributedSlices']} slices distributed, "
            f"{plan['recycledSlices']} recycled"
        )

        await eventBus.poolDistributed(pool, plan)

    async def planDistribution(self, pool: BonusPool, closer: Agent) -> Dict:
        """
        Compute the allocations for a pool without writing anything.
        Supervisors are read one at a time and only while slices remain.
        """
        allocations: List[Dict] = []
        snapshot: List[Dict] = []

        # Direct bonus, independent of rank
        allocations.append({
            "agentId": closer.agentID,
            "type": AllocationType.DIRECT,
            "slices": 0,
            "amount": pool.directAmount,
            "starLevelAtTime": closer.starLevel
        })

        remaining = pool.totalSlices
        current = closer
        visitedIds = set()
        depth = 0

        while remaining > 0:
            if current.agentID in visitedIds or depth > config.MAX_HIERARCHY_DEPTH:
                raise HierarchyCycleError(current.agentID, depth)
            visitedIds.add(current.agentID)

            claim = min(current.starLevel or 0, remaining)
            if claim > 0:
                allocations.append({
                    "agentId": current.agentID,
                    "type": AllocationType.STAR_SLICE,
                    "slices": claim,
                    "amount": pool.sliceValue * claim,
                    "starLevelAtTime": current.starLevel
                })
                remaining -= claim

            snapshot.append({
                "agentId": current.agentID,
                "starLevel": current.starLevel,
                "slicesGiven": claim
            })

            if remaining == 0 or current.supervisorID is None:
                break

            current = await self.directory.getAgent(current.supervisorID)
            depth += 1

        return {
            "allocations": allocations,
            "distributedSlices": pool.totalSlices - remaining,
            "recycledSlices": remaining,
            "hierarchySnapshot": snapshot
        }
