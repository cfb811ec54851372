# models/commission/__init__.py
"""
Commission-specific models for the bonus pool engine.
"""

from models.commission.bonus_pool import BonusPool
from models.commission.bonus_allocation import BonusAllocation
from models.commission.rank_history import RankHistory

__all__ = [
    'BonusPool',
    'BonusAllocation',
    'RankHistory',
]
