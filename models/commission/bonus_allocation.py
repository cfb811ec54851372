# models/commission/bonus_allocation.py
"""
BonusAllocation model - a single grant from a bonus pool to an agent.
"""
from sqlalchemy import Column, Integer, String, DECIMAL, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from models.base import Base, AuditMixin


class BonusAllocation(Base, AuditMixin):
    __tablename__ = 'bonus_allocations'

    allocationID = Column(Integer, primary_key=True, autoincrement=True)

    # Relations
    bonusPoolID = Column(Integer, ForeignKey('bonus_pools.poolID'), nullable=False, index=True)
    agentID = Column(Integer, ForeignKey('agents.agentID'), nullable=False, index=True)

    allocationType = Column(String, nullable=False)  # direct, star_slice
    slices = Column(Integer, default=0, nullable=False)  # 0 for direct
    amount = Column(DECIMAL(12, 2), nullable=False)

    # Rank of the agent when the pool was distributed
    starLevelAtTime = Column(Integer, nullable=False)

    # Payout bookkeeping
    status = Column(String, default="pending", nullable=False)  # pending, paid
    paidAt = Column(DateTime, nullable=True)

    # Relationships
    bonusPool = relationship('BonusPool', back_populates='allocations')
    agent = relationship('Agent', foreign_keys=[agentID])

    def __repr__(self):
        return (
            f"<BonusAllocation(allocationID={self.allocationID}, agent={self.agentID}, "
            f"type={self.allocationType}, amount={self.amount})>"
        )
