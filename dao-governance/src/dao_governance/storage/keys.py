from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class ConfigKey:
    def encode(self) -> str:
        return "config"


@dataclass(slots=True, frozen=True)
class ProposalCountKey:
    def encode(self) -> str:
        return "proposal_count"


@dataclass(slots=True, frozen=True)
class ProposalKey:
    proposal_id: int

    def encode(self) -> str:
        return f"proposal:{self.proposal_id}"


@dataclass(slots=True, frozen=True)
class VoteKey:
    proposal_id: int
    voter: str

    def encode(self) -> str:
        return f"vote:{self.proposal_id}:{self.voter}"


@dataclass(slots=True, frozen=True)
class ProposalVotesKey:
    proposal_id: int

    def encode(self) -> str:
        return f"proposal_votes:{self.proposal_id}"


@dataclass(slots=True, frozen=True)
class NonceKey:
    participant: str

    def encode(self) -> str:
        return f"nonce:{self.participant}"


StorageKey = (
    ConfigKey | ProposalCountKey | ProposalKey | VoteKey | ProposalVotesKey | NonceKey
)
