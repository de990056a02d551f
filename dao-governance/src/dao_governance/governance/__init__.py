"""Governance rules engine and its read-side query layer."""

from dao_governance.governance.clock import Clock, ManualClock, SystemClock
from dao_governance.governance.engine import GovernanceEngine
from dao_governance.governance.queries import ProposalQueries

__all__ = [
    "Clock",
    "GovernanceEngine",
    "ManualClock",
    "ProposalQueries",
    "SystemClock",
]
