# commission_system/services/rank_service.py
"""
Star rank evaluation and persistence.
"""
from typing import Dict, Optional
from sqlalchemy.orm import Session
import logging

from models import RankHistory
from commission_system.config.ranks import STAR_THRESHOLDS, MAX_STAR_LEVEL
from commission_system.repositories.agent_directory import AgentDirectory
from commission_system.events.event_bus import eventBus

logger = logging.getLogger(__name__)


def _thresholdFor(approvedClientCount: int) -> Dict:
    for threshold in reversed(STAR_THRESHOLDS):
        if approvedClientCount >= threshold["minClients"]:
            return threshold
    return STAR_THRESHOLDS[0]


def evaluateRank(approvedClientCount: int) -> Dict:
    """
    Map a count of approved clients to {"tier", "starLevel"}.
    0-2 rookie, 3-6 1-star, 7-12 2-star, 13-20 3-star, 21+ 4-star.
    """
    threshold = _thresholdFor(approvedClientCount)
    return {
        "tier": threshold["tier"].value,
        "starLevel": threshold["starLevel"]
    }


def getLevelProgress(approvedClientCount: int) -> Dict:
    """
    Current level plus how many more approvals the next level needs.
    sliceBonus is the most star pool money the level can claim per pool.
    """
    threshold = _thresholdFor(approvedClientCount)
    progress = {
        "approvedClients": approvedClientCount,
        "starLevel": threshold["starLevel"],
        "tier": threshold["tier"].value,
        "displayName": threshold["displayName"],
        "sliceBonus": threshold["sliceBonus"],
        "nextStarLevel": None,
        "nextTier": None,
        "nextSliceBonus": None,
        "clientsToNextLevel": 0
    }

    if threshold["starLevel"] < MAX_STAR_LEVEL:
        nextThreshold = STAR_THRESHOLDS[threshold["starLevel"] + 1]
        progress["nextStarLevel"] = nextThreshold["starLevel"]
        progress["nextTier"] = nextThreshold["tier"].value
        progress["nextSliceBonus"] = nextThreshold["sliceBonus"]
        progress["clientsToNextLevel"] = nextThreshold["minClients"] - approvedClientCount

    return progress


class RankService:
    """Service for recalculating agent star levels."""

    def __init__(self, session: Session, directory: Optional[AgentDirectory] = None):
        self.session = session
        self.directory = directory or AgentDirectory(session)

    async def recalculateRank(self, agentId: int) -> Dict:
        """
        Count the agent's approved clients, evaluate the rank table and
        persist the result. A change of level is recorded in RankHistory.
        """
        agent = await self.directory.getAgent(agentId)
        approvedCount = await self.directory.countApprovedClients(agentId)
        result = evaluateRank(approvedCount)

        previousTier = agent.tier
        previousLevel = agent.starLevel
        changed = previousLevel != result["starLevel"] or previousTier != result["tier"]

        await self.directory.setRank(agentId, result["tier"], result["starLevel"])

        if changed:
            self.session.add(RankHistory(
                agentID=agentId,
                previousTier=previousTier,
                newTier=result["tier"],
                previousStarLevel=previousLevel,
                newStarLevel=result["starLevel"],
                approvedClients=approvedCount
            ))

        self.session.commit()

        if changed:
            logger.info(
                f"Agent {agentId} rank updated: {previousTier} -> {result['tier']} "
                f"({approvedCount} approved clients)"
            )
            await eventBus.rankChanged(agentId, previousTier, result, approvedCount)

        return result

    async def getAgentLevelProgress(self, agentId: int) -> Dict:
        await self.directory.getAgent(agentId)
        approvedCount = await self.directory.countApprovedClients(agentId)
        return getLevelProgress(approvedCount)
