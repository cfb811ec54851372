# commission_system/config/ranks.py
"""
Star ranks configuration and bonus pool constants.
"""
from enum import Enum
from decimal import Decimal


class Tier(Enum):
    ROOKIE = "rookie"
    ONE_STAR = "1-star"
    TWO_STAR = "2-star"
    THREE_STAR = "3-star"
    FOUR_STAR = "4-star"


class AllocationType:
    DIRECT = "direct"
    STAR_SLICE = "star_slice"
    BACKFILL = "backfill"  # legacy label, never produced by distribution


class PoolStatus:
    PENDING = "pending"
    DISTRIBUTED = "distributed"


class AllocationStatus:
    PENDING = "pending"
    PAID = "paid"


APPROVED_INTAKE_STATUS = "approved"

# Bonus pool per approved client
POOL_TOTAL_AMOUNT = Decimal("400")
POOL_DIRECT_AMOUNT = Decimal("200")  # Always paid to the closer
POOL_STAR_AMOUNT = Decimal("200")
POOL_TOTAL_SLICES = 4
POOL_SLICE_VALUE = Decimal("50")

MAX_STAR_LEVEL = 4


def sliceBonusForLevel(starLevel: int) -> Decimal:
    """Maximum star pool amount an agent of this level can claim per pool."""
    return POOL_SLICE_VALUE * min(starLevel, POOL_TOTAL_SLICES)


# Ordered by starLevel; maxClients is inclusive, None means unbounded
STAR_THRESHOLDS = [
    {
        "starLevel": 0,
        "tier": Tier.ROOKIE,
        "minClients": 0,
        "maxClients": 2,
        "displayName": "Rookie",
        "sliceBonus": sliceBonusForLevel(0)
    },
    {
        "starLevel": 1,
        "tier": Tier.ONE_STAR,
        "minClients": 3,
        "maxClients": 6,
        "displayName": "1-Star Agent",
        "sliceBonus": sliceBonusForLevel(1)
    },
    {
        "starLevel": 2,
        "tier": Tier.TWO_STAR,
        "minClients": 7,
        "maxClients": 12,
        "displayName": "2-Star Agent",
        "sliceBonus": sliceBonusForLevel(2)
    },
    {
        "starLevel": 3,
        "tier": Tier.THREE_STAR,
        "minClients": 13,
        "maxClients": 20,
        "displayName": "3-Star Agent",
        "sliceBonus": sliceBonusForLevel(3)
    },
    {
        "starLevel": 4,
        "tier": Tier.FOUR_STAR,
        "minClients": 21,
        "maxClients": None,
        "displayName": "4-Star Agent",
        "sliceBonus": sliceBonusForLevel(4)
    },
]
