"""Domain models for weighted proposal governance."""

from dao_governance.domain.errors import ErrorCode, GovernanceError
from dao_governance.domain.events import EventTopic, GovernanceEvent, InMemoryEventLog
from dao_governance.domain.governance_config import ConfigUpdate, GovernanceConfig
from dao_governance.domain.proposal import (
    Proposal,
    ProposalStatus,
    ProposalType,
    VoteDirection,
    VoteRecord,
)

__all__ = [
    "ConfigUpdate",
    "ErrorCode",
    "EventTopic",
    "GovernanceConfig",
    "GovernanceError",
    "GovernanceEvent",
    "InMemoryEventLog",
    "Proposal",
    "ProposalStatus",
    "ProposalType",
    "VoteDirection",
    "VoteRecord",
]
