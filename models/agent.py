# models/agent.py
"""
Agent model - participant of the reporting hierarchy.
"""
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from models.base import Base, AuditMixin


class Agent(Base, AuditMixin):
    __tablename__ = 'agents'

    agentID = Column(Integer, primary_key=True, autoincrement=True)

    # Single upward link; the hierarchy is a forest of parent pointers
    supervisorID = Column(Integer, ForeignKey('agents.agentID'), nullable=True, index=True)

    name = Column(String, nullable=False)
    email = Column(String, nullable=True, unique=True)
    isActive = Column(Boolean, default=True)

    # Rank - mutated only by RankService.recalculateRank
    starLevel = Column(Integer, default=0, nullable=False)  # 0..4
    tier = Column(String, default="rookie", nullable=False)  # rookie, 1-star .. 4-star

    def __repr__(self):
        return f"<Agent(agentID={self.agentID}, tier={self.tier}, supervisor={self.supervisorID})>"
