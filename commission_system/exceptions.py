# commission_system/exceptions.py
"""
Errors raised by the commission engine.

"Pool already exists" and "pool already distributed" are not errors:
the services return the existing state instead.
"""


class CommissionError(Exception):
    """Base class for commission engine failures."""
    pass


class ClientNotFoundError(CommissionError):
    def __init__(self, clientId):
        self.clientId = clientId
        super().__init__(f"Client {clientId} not found")


class ClientNotApprovedError(CommissionError):
    def __init__(self, clientId, intakeStatus):
        self.clientId = clientId
        self.intakeStatus = intakeStatus
        super().__init__(f"Client {clientId} is not approved (status: {intakeStatus})")


class AgentNotFoundError(CommissionError):
    """Unknown agent or a supervisor reference pointing nowhere."""

    def __init__(self, agentId):
        self.agentId = agentId
        super().__init__(f"Agent {agentId} not found")


class PoolNotFoundError(CommissionError):
    def __init__(self, poolId):
        self.poolId = poolId
        super().__init__(f"Bonus pool {poolId} not found")


class HierarchyCycleError(CommissionError):
    """Supervisor chain loops back on itself or exceeds the depth limit."""

    def __init__(self, agentId, depth):
        self.agentId = agentId
        self.depth = depth
        super().__init__(f"Supervisor chain cycle or overflow at agent {agentId} (depth {depth})")


class PoolAlreadyDistributedError(CommissionError):
    """
    The pending -> distributed transition matched no row because another
    worker distributed the pool first. DistributionService treats it as a no-op.
    """

    def __init__(self, poolId):
        self.poolId = poolId
        super().__init__(f"Bonus pool {poolId} is no longer pending")
