from __future__ import annotations

from dao_governance.domain.errors import InvalidInputError
from dao_governance.domain.proposal import Proposal, VoteRecord
from dao_governance.oracles.base import WeightSourceRegistry
from dao_governance.storage.config_store import ConfigurationStore
from dao_governance.storage.ledger import ProposalLedger

DEFAULT_MAX_PAGE_SIZE = 50


class ProposalQueries:
    """Read-only views over the ledger; nothing here writes state."""

    def __init__(
        self,
        ledger: ProposalLedger,
        config_store: ConfigurationStore,
        weights: WeightSourceRegistry,
        *,
        max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
    ) -> None:
        if max_page_size < 1:
            raise ValueError("max_page_size must be positive")
        self._ledger = ledger
        self._config_store = config_store
        self._weights = weights
        self._max_page_size = max_page_size

    @property
    def max_page_size(self) -> int:
        return self._max_page_size

    def get_proposal(self, proposal_id: int) -> Proposal:
        return self._ledger.get_proposal(proposal_id)

    def get_all_proposals(self) -> list[Proposal]:
        return self._ledger.proposals_in_range(1, self._ledger.proposal_count())

    def get_proposals_paginated(self, page: int, page_size: int) -> list[Proposal]:
        if page < 1:
            raise InvalidInputError("page is 1-indexed")
        if page_size < 1:
            raise InvalidInputError("page_size must be positive")

        size = min(page_size, self._max_page_size)
        count = self._ledger.proposal_count()
        first_id = (page - 1) * size + 1
        if first_id > count:
            return []
        last_id = min(first_id + size - 1, count)
        return self._ledger.proposals_in_range(first_id, last_id)

    def get_total_proposal_count(self) -> int:
        return self._ledger.proposal_count()

    def get_proposal_results(self, proposal_id: int) -> tuple[int, int]:
        proposal = self._ledger.get_proposal(proposal_id)
        return proposal.upvotes, proposal.downvotes

    def has_voted(self, proposal_id: int, voter: str) -> bool:
        return self._ledger.has_voted(proposal_id, voter)

    def get_vote(self, proposal_id: int, voter: str) -> VoteRecord | None:
        return self._ledger.get_vote(proposal_id, voter)

    def get_votes_for_proposal(self, proposal_id: int) -> list[VoteRecord]:
        self._ledger.get_proposal(proposal_id)
        return self._ledger.votes_for(proposal_id)

    def get_voting_power(self, participant: str) -> int:
        config = self._config_store.load()
        return self._weights.oracle_for(config).weight_of(participant)
