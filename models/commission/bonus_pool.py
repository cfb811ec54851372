# models/commission/bonus_pool.py
"""
BonusPool model - one fixed-size pool per approved client.
"""
from sqlalchemy import Column, Integer, String, DECIMAL, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship
from models.base import Base, AuditMixin


class BonusPool(Base, AuditMixin):
    __tablename__ = 'bonus_pools'

    poolID = Column(Integer, primary_key=True, autoincrement=True)

    # One pool per client, enforced by the storage layer
    clientID = Column(Integer, ForeignKey('clients.clientID'), nullable=False, unique=True)
    closerID = Column(Integer, ForeignKey('agents.agentID'), nullable=False, index=True)

    # Pool amounts
    totalAmount = Column(DECIMAL(12, 2), nullable=False)  # 400
    directAmount = Column(DECIMAL(12, 2), nullable=False)  # 200 to the closer
    starPoolAmount = Column(DECIMAL(12, 2), nullable=False)  # 200 split into slices

    # Slices
    totalSlices = Column(Integer, nullable=False)  # 4
    sliceValue = Column(DECIMAL(12, 2), nullable=False)  # 50
    distributedSlices = Column(Integer, default=0, nullable=False)
    recycledSlices = Column(Integer, default=0, nullable=False)

    # Status
    status = Column(String, default="pending", nullable=False)  # pending, distributed
    distributedAt = Column(DateTime, nullable=True)

    # Agents visited by the hierarchy walk, in claim order
    hierarchySnapshot = Column(JSON, nullable=True)
    # [{"agentId": 7, "starLevel": 1, "slicesGiven": 1}, ...]

    # Relationships
    client = relationship('Client', foreign_keys=[clientID])
    closer = relationship('Agent', foreign_keys=[closerID])
    allocations = relationship('BonusAllocation', back_populates='bonusPool',
                               order_by='BonusAllocation.allocationID')

    def __repr__(self):
        return f"<BonusPool(poolID={self.poolID}, client={self.clientID}, status={self.status})>"
