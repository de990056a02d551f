from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any

# Tallies and weights live in the unsigned 64-bit range.
MAX_WEIGHT = 2**64 - 1


class ProposalType(StrEnum):
    FUNDING = "Funding"
    FEATURE = "Feature"
    POLICY = "Policy"
    OTHER = "Other"


class ProposalStatus(StrEnum):
    ACTIVE = "Active"
    PASSED = "Passed"
    REJECTED = "Rejected"


class VoteDirection(StrEnum):
    UP = "Up"
    DOWN = "Down"

    @property
    def is_upvote(self) -> bool:
        return self is VoteDirection.UP


@dataclass(slots=True, frozen=True)
class Proposal:
    id: int
    title: str
    description: str
    proposal_type: ProposalType
    proposer: str
    created_at: int
    closes_at: int
    status: ProposalStatus
    upvotes: int
    downvotes: int
    quorum: int
    approval_threshold: int
    executed: bool = False

    @property
    def total_votes(self) -> int:
        return self.upvotes + self.downvotes

    def with_tally(self, *, upvotes: int, downvotes: int) -> Proposal:
        return replace(self, upvotes=upvotes, downvotes=downvotes)

    def with_status(self, status: ProposalStatus) -> Proposal:
        return replace(self, status=status)

    def mark_executed(self) -> Proposal:
        return replace(self, executed=True)

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "proposal_type": self.proposal_type.value,
            "proposer": self.proposer,
            "created_at": self.created_at,
            "closes_at": self.closes_at,
            "status": self.status.value,
            "upvotes": self.upvotes,
            "downvotes": self.downvotes,
            "quorum": self.quorum,
            "approval_threshold": self.approval_threshold,
            "executed": self.executed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Proposal:
        return cls(
            id=int(data["id"]),
            title=str(data["title"]),
            description=str(data["description"]),
            proposal_type=ProposalType(data["proposal_type"]),
            proposer=str(data["proposer"]),
            created_at=int(data["created_at"]),
            closes_at=int(data["closes_at"]),
            status=ProposalStatus(data["status"]),
            upvotes=int(data["upvotes"]),
            downvotes=int(data["downvotes"]),
            quorum=int(data["quorum"]),
            approval_threshold=int(data["approval_threshold"]),
            executed=bool(data["executed"]),
        )


@dataclass(slots=True, frozen=True)
class VoteRecord:
    proposal_id: int
    voter: str
    direction: VoteDirection
    weight: int
    cast_at: int

    def as_dict(self) -> dict[str, Any]:
        return {
            "proposal_id": self.proposal_id,
            "voter": self.voter,
            "direction": self.direction.value,
            "weight": self.weight,
            "cast_at": self.cast_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VoteRecord:
        return cls(
            proposal_id=int(data["proposal_id"]),
            voter=str(data["voter"]),
            direction=VoteDirection(data["direction"]),
            weight=int(data["weight"]),
            cast_at=int(data["cast_at"]),
        )
