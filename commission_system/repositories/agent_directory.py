# commission_system/repositories/agent_directory.py
"""
Agent directory - read access to the hierarchy and rank persistence.
"""
from sqlalchemy.orm import Session
from sqlalchemy import func
import logging

from models import Agent, Client
from commission_system.config.ranks import APPROVED_INTAKE_STATUS
from commission_system.exceptions import AgentNotFoundError, ClientNotFoundError

logger = logging.getLogger(__name__)


class AgentDirectory:
    """Lookups over agents and their clients."""

    def __init__(self, session: Session):
        self.session = session

    async def getAgent(self, agentId: int) -> Agent:
        """Return the agent or raise AgentNotFoundError."""
        agent = self.session.query(Agent).filter_by(agentID=agentId).first()
        if not agent:
            raise AgentNotFoundError(agentId)
        return agent

    async def getClient(self, clientId: int) -> Client:
        client = self.session.query(Client).filter_by(clientID=clientId).first()
        if not client:
            raise ClientNotFoundError(clientId)
        return client

    async def countApprovedClients(self, agentId: int) -> int:
        return self.session.query(func.count(Client.clientID)).filter(
            Client.agentID == agentId,
            Client.intakeStatus == APPROVED_INTAKE_STATUS
        ).scalar() or 0

    async def setRank(self, agentId: int, tier: str, starLevel: int):
        """Write tier and starLevel together. Caller owns the commit."""
        agent = await self.getAgent(agentId)
        agent.tier = tier
        agent.starLevel = starLevel
