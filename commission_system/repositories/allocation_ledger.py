# commission_system/repositories/allocation_ledger.py
"""
Allocation ledger - durable storage for bonus pools and allocations.
"""
from decimal import Decimal
from typing import Callable, Dict, Any, List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from models import BonusPool, BonusAllocation
from commission_system.config.ranks import (
    POOL_TOTAL_AMOUNT, POOL_DIRECT_AMOUNT, POOL_STAR_AMOUNT,
    POOL_TOTAL_SLICES, POOL_SLICE_VALUE, PoolStatus, AllocationStatus
)
from commission_system.exceptions import PoolNotFoundError, PoolAlreadyDistributedError

logger = logging.getLogger(__name__)


class AllocationLedger:
    """Pool and allocation persistence with an all-or-nothing batch primitive."""

    def __init__(self, session: Session):
        self.session = session

    async def findPoolByClient(self, clientId: int) -> Optional[BonusPool]:
        return self.session.query(BonusPool).filter_by(clientID=clientId).first()

    async def getPool(self, poolId: int) -> BonusPool:
        pool = self.session.query(BonusPool).filter_by(poolID=poolId).first()
        if not pool:
            raise PoolNotFoundError(poolId)
        return pool

    async def createPool(self, clientId: int, closerId: int) -> Tuple[BonusPool, bool]:
        """
        Create and commit a pending pool for the client.
        Returns (pool, created). When the unique clientID constraint rejects
        the insert, the pool created concurrently is re-fetched and returned
        with created=False.
        """
        pool = BonusPool(
            clientID=clientId,
            closerID=closerId,
            totalAmount=POOL_TOTAL_AMOUNT,
            directAmount=POOL_DIRECT_AMOUNT,
            starPoolAmount=POOL_STAR_AMOUNT,
            totalSlices=POOL_TOTAL_SLICES,
            sliceValue=POOL_SLICE_VALUE,
            distributedSlices=0,
            recycledSlices=0,
            status=PoolStatus.PENDING
        )

        try:
            self.session.add(pool)
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            existing = await self.findPoolByClient(clientId)
            if not existing:
                raise
            logger.warning(
                f"Bonus pool for client {clientId} was created concurrently, "
                f"using pool {existing.poolID}"
            )
            return existing, False

        return pool, True

    def createAllocation(
            self,
            poolId: int,
            agentId: int,
            allocationType: str,
            slices: int,
            amount: Decimal,
            starLevelAtTime: int
    ) -> BonusAllocation:
        """Stage an allocation in the current transaction."""
        allocation = BonusAllocation(
            bonusPoolID=poolId,
            agentID=agentId,
            allocationType=allocationType,
            slices=slices,
            amount=amount,
            starLevelAtTime=starLevelAtTime,
            status=AllocationStatus.PENDING
        )
        self.session.add(allocation)
        return allocation

    def updatePool(self, poolId: int, fields: Dict[str, Any], expectedStatus: Optional[str] = None) -> int:
        """
        Stage pool field updates in the current transaction as a single
        UPDATE. With expectedStatus the row only matches while it still has
        that status; a miss raises PoolAlreadyDistributedError.
        """
        query = self.session.query(BonusPool).filter(BonusPool.poolID == poolId)
        if expectedStatus is not None:
            query = query.filter(BonusPool.status == expectedStatus)

        updated = query.update(fields, synchronize_session=False)
        if updated == 0:
            if expectedStatus is not None:
                raise PoolAlreadyDistributedError(poolId)
            raise PoolNotFoundError(poolId)
        return updated

    async def runAtomic(self, operations: List[Callable[[], Any]]) -> List[Any]:
        """
        Execute operations in a single transaction.
        Everything is committed together, or everything is rolled back and
        the original exception is re-raised.
        """
        results = []
        try:
            for operation in operations:
                results.append(operation())
            self.session.commit()
        except PoolAlreadyDistributedError:
            self.session.rollback()
            raise
        except Exception as e:
            self.session.rollback()
            logger.error(f"Atomic batch of {len(operations)} operations rolled back: {e}")
            raise

        return results
