# models/client.py
"""
Client model - the onboarded customer whose approval triggers a bonus pool.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from models.base import Base, AuditMixin


class Client(Base, AuditMixin):
    __tablename__ = 'clients'

    clientID = Column(Integer, primary_key=True, autoincrement=True)

    # Closer - agent who owns the client
    agentID = Column(Integer, ForeignKey('agents.agentID'), nullable=False, index=True)

    firstName = Column(String, nullable=False)
    lastName = Column(String, nullable=True)

    intakeStatus = Column(String, default="pending", index=True)  # pending, approved, rejected, closed
    approvedAt = Column(DateTime, nullable=True)

    agent = relationship('Agent', foreign_keys=[agentID])

    def __repr__(self):
        return f"<Client(clientID={self.clientID}, agent={self.agentID}, status={self.intakeStatus})>"
