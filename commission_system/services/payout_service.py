# commission_system/services/payout_service.py
"""
Payout bookkeeping for bonus allocations and per-agent commission summaries.
"""
from decimal import Decimal
from datetime import datetime, timezone
from typing import Dict, List
from sqlalchemy.orm import Session
import logging

from models import BonusAllocation
from commission_system.config.ranks import AllocationType, AllocationStatus
from commission_system.events.event_bus import eventBus

logger = logging.getLogger(__name__)

STAR_ALLOCATION_TYPES = (AllocationType.STAR_SLICE, AllocationType.BACKFILL)


class PayoutService:
    """Marks allocations paid and reports what agents have earned."""

    def __init__(self, session: Session):
        self.session = session

    async def markAllocationPaid(self, allocationId: int) -> Dict:
        """Transition a single allocation pending -> paid."""
        if not allocationId:
            return {"success": False, "error": "Allocation ID is required"}

        allocation = self.session.query(BonusAllocation).filter_by(
            allocationID=allocationId
        ).first()

        if not allocation:
            return {"success": False, "error": "Allocation not found"}

        updated = self.session.query(BonusAllocation).filter(
            BonusAllocation.allocationID == allocationId,
            BonusAllocation.status == AllocationStatus.PENDING
        ).update(
            {"status": AllocationStatus.PAID, "paidAt": datetime.now(timezone.utc)},
            synchronize_session="fetch"
        )
        self.session.commit()

        if not updated:
            logger.warning(f"Allocation {allocationId} is already paid")
            return {"success": False, "error": "Allocation is already paid"}

        logger.info(f"Allocation {allocationId} marked paid: {allocation.amount} to agent {allocation.agentID}")
        await eventBus.allocationsPaid([allocationId])

        return {"success": True}

    async def bulkMarkPaid(self, allocationIds: List[int]) -> Dict:
        """Mark every pending allocation among allocationIds as paid."""
        if not allocationIds:
            return {"success": False, "updated": 0, "error": "No allocations selected"}

        paidAt = datetime.now(timezone.utc)
        updated = self.session.query(BonusAllocation).filter(
            BonusAllocation.allocationID.in_(allocationIds),
            BonusAllocation.status == AllocationStatus.PENDING
        ).update(
            {"status": AllocationStatus.PAID, "paidAt": paidAt},
            synchronize_session="fetch"
        )
        self.session.commit()

        logger.info(f"Bulk payout: {updated} of {len(allocationIds)} allocations marked paid")
        if updated:
            # Rows already paid by a concurrent payout keep their own paidAt
            paidIds = [
                row.allocationID for row in self.session.query(BonusAllocation.allocationID).filter(
                    BonusAllocation.allocationID.in_(allocationIds),
                    BonusAllocation.paidAt == paidAt
                ).order_by(BonusAllocation.allocationID).all()
            ]
            await eventBus.allocationsPaid(paidIds)

        return {"success": True, "updated": updated}

    async def getAgentCommissionSummary(self, agentId: int) -> Dict:
        """All allocations of an agent, newest first, with totals."""
        allocations = self.session.query(BonusAllocation).filter(
            BonusAllocation.agentID == agentId
        ).order_by(
            BonusAllocation.createdAt.desc(),
            BonusAllocation.allocationID.desc()
        ).all()

        totalEarned = sum((Decimal(a.amount) for a in allocations), Decimal("0"))
        pending = sum(
            (Decimal(a.amount) for a in allocations if a.status == AllocationStatus.PENDING),
            Decimal("0")
        )
        paid = sum(
            (Decimal(a.amount) for a in allocations if a.status == AllocationStatus.PAID),
            Decimal("0")
        )

        return {
            "allocations": allocations,
            "totalEarned": totalEarned,
            "pending": pending,
            "paid": paid,
            "directBonuses": len([a for a in allocations if a.allocationType == AllocationType.DIRECT]),
            "starSlices": sum(a.slices for a in allocations if a.allocationType in STAR_ALLOCATION_TYPES)
        }
