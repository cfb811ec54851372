# models/commission/rank_history.py
"""
RankHistory model - tracks star level changes.
"""
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from models.base import Base


class RankHistory(Base):
    __tablename__ = 'rank_history'

    historyID = Column(Integer, primary_key=True, autoincrement=True)
    createdAt = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    # Relations
    agentID = Column(Integer, ForeignKey('agents.agentID'), nullable=False, index=True)

    # Rank details
    previousTier = Column(String, nullable=True)
    newTier = Column(String, nullable=False)
    previousStarLevel = Column(Integer, nullable=True)
    newStarLevel = Column(Integer, nullable=False)

    # Qualification metric at time of change
    approvedClients = Column(Integer, nullable=False)

    notes = Column(Text, nullable=True)

    agent = relationship('Agent', foreign_keys=[agentID])

    def __repr__(self):
        return f"<RankHistory(agent={self.agentID}, tier={self.newTier}, date={self.createdAt})>"
