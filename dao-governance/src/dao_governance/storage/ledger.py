from __future__ import annotations

from dao_governance.domain.errors import ProposalNotFoundError, VoteLimitExceededError
from dao_governance.domain.proposal import Proposal, VoteRecord
from dao_governance.storage.keys import ProposalCountKey, ProposalKey, ProposalVotesKey, VoteKey
from dao_governance.storage.substrate import Storage

MAX_VOTES_PER_PROPOSAL = 1000


class ProposalLedger:
    """Proposals by monotonic id plus the per-proposal vote side-table."""

    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    def proposal_count(self) -> int:
        raw = self._storage.get(ProposalCountKey())
        return int(raw) if raw is not None else 0

    def allocate_id(self) -> int:
        next_id = self.proposal_count() + 1
        self._storage.set(ProposalCountKey(), next_id)
        return next_id

    def save_proposal(self, proposal: Proposal) -> None:
        self._storage.set(ProposalKey(proposal.id), proposal.as_dict())

    def find_proposal(self, proposal_id: int) -> Proposal | None:
        raw = self._storage.get(ProposalKey(proposal_id))
        if raw is None:
            return None
        return Proposal.from_dict(raw)

    def get_proposal(self, proposal_id: int) -> Proposal:
        proposal = self.find_proposal(proposal_id)
        if proposal is None:
            raise ProposalNotFoundError(f"proposal not found: {proposal_id}")
        return proposal

    def proposals_in_range(self, first_id: int, last_id: int) -> list[Proposal]:
        proposals: list[Proposal] = []
        for proposal_id in range(max(first_id, 1), last_id + 1):
            proposal = self.find_proposal(proposal_id)
            if proposal is not None:
                proposals.append(proposal)
        return proposals

    def has_voted(self, proposal_id: int, voter: str) -> bool:
        return self._storage.has(VoteKey(proposal_id, voter))

    def get_vote(self, proposal_id: int, voter: str) -> VoteRecord | None:
        raw = self._storage.get(VoteKey(proposal_id, voter))
        if raw is None:
            return None
        return VoteRecord.from_dict(raw)

    def votes_for(self, proposal_id: int) -> list[VoteRecord]:
        raw_votes = self._storage.get(ProposalVotesKey(proposal_id)) or []
        return [VoteRecord.from_dict(raw) for raw in raw_votes]

    def record_vote(self, vote: VoteRecord) -> None:
        raw_votes = self._storage.get(ProposalVotesKey(vote.proposal_id)) or []
        if len(raw_votes) >= MAX_VOTES_PER_PROPOSAL:
            raise VoteLimitExceededError(
                f"proposal {vote.proposal_id} already holds {MAX_VOTES_PER_PROPOSAL} votes"
            )
        raw_votes.append(vote.as_dict())
        self._storage.set(VoteKey(vote.proposal_id, vote.voter), vote.as_dict())
        self._storage.set(ProposalVotesKey(vote.proposal_id), raw_votes)
