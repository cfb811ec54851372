# commission_system/events/event_bus.py
"""
Commission events for downstream subsystems (general ledger mirroring,
notifications, reporting).

Services publish only after their transaction has committed. A handler
failure is logged and never undoes pool, allocation or rank state.
"""
from decimal import Decimal
from typing import Dict, List, Callable, Any, Iterable
import logging
import asyncio

logger = logging.getLogger(__name__)


class CommissionEvents:
    """Events emitted by the commission engine."""

    POOL_CREATED = "bonus_pool.created"
    POOL_DISTRIBUTED = "bonus_pool.distributed"
    RANK_CHANGED = "rank.changed"
    ALLOCATION_PAID = "allocation.paid"

    ALL = (POOL_CREATED, POOL_DISTRIBUTED, RANK_CHANGED, ALLOCATION_PAID)


class CommissionEventBus:
    """Publishes commission payloads to in-process subscribers."""

    def __init__(self):
        self._handlers: Dict[str, List[Callable]] = {}

    def subscribe(self, eventName: str, handler: Callable):
        if eventName not in CommissionEvents.ALL:
            raise ValueError(f"Unknown commission event: {eventName}")
        self._handlers.setdefault(eventName, []).append(handler)

    def unsubscribe(self, eventName: str, handler: Callable):
        if handler in self._handlers.get(eventName, []):
            self._handlers[eventName].remove(handler)

    def clear(self):
        self._handlers.clear()

    async def poolCreated(self, pool):
        await self._publish(CommissionEvents.POOL_CREATED, {
            "poolId": pool.poolID,
            "clientId": pool.clientID,
            "closerId": pool.closerID
        })

    async def poolDistributed(self, pool, plan: Dict):
        """Payload carries every committed allocation; the ledger mirror books from it."""
        allocations = plan["allocations"]
        await self._publish(CommissionEvents.POOL_DISTRIBUTED, {
            "poolId": pool.poolID,
            "clientId": pool.clientID,
            "closerId": pool.closerID,
            "allocations": allocations,
            "allocatedAmount": sum((a["amount"] for a in allocations), Decimal("0")),
            "distributedSlices": plan["distributedSlices"],
            "recycledSlices": plan["recycledSlices"]
        })

    async def rankChanged(self, agentId: int, previousTier: str, rank: Dict, approvedClients: int):
        await self._publish(CommissionEvents.RANK_CHANGED, {
            "agentId": agentId,
            "previousTier": previousTier,
            "newTier": rank["tier"],
            "starLevel": rank["starLevel"],
            "approvedClients": approvedClients
        })

    async def allocationsPaid(self, allocationIds: Iterable[int]):
        await self._publish(CommissionEvents.ALLOCATION_PAID, {
            "allocationIds": list(allocationIds)
        })

    async def _publish(self, eventName: str, payload: Dict[str, Any]):
        # Snapshot so a handler may unsubscribe itself while being called
        handlers = list(self._handlers.get(eventName, []))
        if not handlers:
            return

        logger.debug(f"Publishing {eventName} to {len(handlers)} handlers: {payload}")

        for handler in handlers:
            try:
                if asyncio.iscoroutinefunction(handler):
                    await handler(payload)
                else:
                    handler(payload)
            except Exception as e:
                logger.error(f"Handler {getattr(handler, '__name__', handler)} failed for {eventName}: {e}")


# Global event bus instance
eventBus = CommissionEventBus()
