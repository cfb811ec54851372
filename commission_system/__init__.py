# commission_system/__init__.py
"""
Commission system - bonus pool creation, star pool distribution and ranks.
"""

# Services
from commission_system.services.bonus_pool_service import BonusPoolService
from commission_system.services.distribution_service import DistributionService
from commission_system.services.rank_service import RankService, evaluateRank, getLevelProgress
from commission_system.services.payout_service import PayoutService

# Collaborators
from commission_system.repositories.agent_directory import AgentDirectory
from commission_system.repositories.allocation_ledger import AllocationLedger

# Configuration
from commission_system.config.ranks import Tier, STAR_THRESHOLDS

# Events
from commission_system.events.event_bus import eventBus, CommissionEvents

__all__ = [
    # Services
    'BonusPoolService',
    'DistributionService',
    'RankService',
    'PayoutService',
    'evaluateRank',
    'getLevelProgress',

    # Collaborators
    'AgentDirectory',
    'AllocationLedger',

    # Config
    'Tier',
    'STAR_THRESHOLDS',

    # Events
    'eventBus',
    'CommissionEvents',
]
