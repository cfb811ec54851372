# models/__init__.py
"""
Database models for the commission platform.
Import all models here for easy access.
"""

# Base and mixins
from models.base import Base, AuditMixin

# Core models
from models.agent import Agent
from models.client import Client

# Commission models
from models.commission.bonus_pool import BonusPool
from models.commission.bonus_allocation import BonusAllocation
from models.commission.rank_history import RankHistory

__all__ = [
    # Base
    'Base',
    'AuditMixin',

    # Core
    'Agent',
    'Client',

    # Commission
    'BonusPool',
    'BonusAllocation',
    'RankHistory',
]
