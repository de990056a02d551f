from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace
from typing import TypeVar

from dao_governance.domain import events
from dao_governance.domain.errors import (
    AlreadyInitializedError,
    AlreadyVotedError,
    ContractPausedError,
    ExecutionDelayNotMetError,
    InsufficientVotingPowerError,
    InvalidInputError,
    ProposalAlreadyExecutedError,
    ProposalNotActiveError,
    ProposalNotPassedError,
    UnauthorizedError,
    VotingEndedError,
    VotingNotEndedError,
)
from dao_governance.domain.events import EventLog, GovernanceEvent
from dao_governance.domain.governance_config import ConfigUpdate, GovernanceConfig
from dao_governance.domain.proposal import (
    Proposal,
    ProposalStatus,
    ProposalType,
    VoteDirection,
    VoteRecord,
)
from dao_governance.governance import rules
from dao_governance.governance.clock import Clock, SystemClock
from dao_governance.governance.queries import DEFAULT_MAX_PAGE_SIZE, ProposalQueries
from dao_governance.identity import IdentityGate
from dao_governance.observability.logging import get_logger
from dao_governance.oracles.base import WeightSourceRegistry
from dao_governance.storage.config_store import ConfigurationStore
from dao_governance.storage.ledger import ProposalLedger
from dao_governance.storage.substrate import Storage


ChoiceT = TypeVar("ChoiceT", ProposalType, VoteDirection)


def _coerce_choice(enum_type: type[ChoiceT], raw_value: object, field_name: str) -> ChoiceT:
    try:
        return enum_type(raw_value)
    except ValueError as exc:
        choices = ", ".join(member.value for member in enum_type)
        raise InvalidInputError(f"{field_name} must be one of: {choices}") from exc


class GovernanceEngine:
    """Proposal lifecycle: create, vote, finalize, execute.

    Each state-changing call runs start to finish inside one storage
    ``atomic`` block, identity check included, so anything the gate records
    (such as a consumed signing nonce) commits or rolls back with the
    operation. Events collected during the call reach the event log only
    after that block commits.
    """

    def __init__(
        self,
        storage: Storage,
        gate: IdentityGate,
        weights: WeightSourceRegistry,
        event_log: EventLog,
        *,
        clock: Clock | None = None,
        max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
    ) -> None:
        self._storage = storage
        self._gate = gate
        self._weights = weights
        self._event_log = event_log
        self._clock = clock or SystemClock()
        self._config_store = ConfigurationStore(storage)
        self._ledger = ProposalLedger(storage)
        self.queries = ProposalQueries(
            self._ledger,
            self._config_store,
            weights,
            max_page_size=max_page_size,
        )

    @contextmanager
    def _transaction(self) -> Iterator[list[GovernanceEvent]]:
        pending: list[GovernanceEvent] = []
        with self._storage.atomic():
            yield pending
        for event in pending:
            self._event_log.publish(event)

    def _require_admin(self, caller: str, action: str) -> GovernanceConfig:
        self._gate.require_auth(caller, action)
        config = self._config_store.load()
        if caller != config.admin:
            raise UnauthorizedError(f"{action}: {caller} is not the governance admin")
        return config

    # -- configuration -------------------------------------------------

    def initialize(
        self,
        admin: str,
        reputation_oracle: str,
        badge_oracle: str,
        creation_threshold: int,
        execution_delay: int,
        min_voting_window: int,
    ) -> GovernanceConfig:
        with self._transaction() as pending:
            if self._config_store.is_initialized():
                raise AlreadyInitializedError("governance configuration already exists")
            self._gate.require_auth(admin, "initialize")

            config = GovernanceConfig(
                admin=admin,
                reputation_oracle=reputation_oracle,
                badge_oracle=badge_oracle,
                creation_threshold=creation_threshold,
                execution_delay=execution_delay,
                min_voting_window=min_voting_window,
            )
            config.ensure_valid()
            self._config_store.save(config)
            pending.append(events.contract_initialized())

        get_logger("governance").info("contract_initialized", admin=admin)
        return config

    def get_config(self) -> GovernanceConfig:
        return self._config_store.load()

    def update_config(self, caller: str, update: ConfigUpdate) -> GovernanceConfig:
        with self._transaction() as pending:
            config = self._require_admin(caller, "update_config")
            updated = config.updated(update)
            updated.ensure_valid()
            self._config_store.save(updated)
            pending.append(events.config_updated())

        get_logger("governance").info(
            "config_updated",
            caller=caller,
            fields=sorted(key for key, value in update.as_dict().items() if value is not None),
        )
        return updated

    def set_paused(self, caller: str, paused: bool) -> GovernanceConfig:
        with self._transaction() as pending:
            config = self._require_admin(caller, "set_paused")
            updated = replace(config, paused=paused)
            self._config_store.save(updated)
            pending.append(events.config_updated())

        get_logger("governance").info("pause_changed", caller=caller, paused=paused)
        return updated

    def pause(self, caller: str) -> GovernanceConfig:
        return self.set_paused(caller, True)

    def unpause(self, caller: str) -> GovernanceConfig:
        return self.set_paused(caller, False)

    # -- proposal lifecycle --------------------------------------------

    def create_proposal(
        self,
        proposer: str,
        title: str,
        description: str,
        proposal_type: ProposalType,
        requested_window: int,
        quorum: int,
        approval_threshold: int,
    ) -> int:
        with self._transaction() as pending:
            self._gate.require_auth(proposer, "create_proposal")
            config = self._config_store.load()
            if config.paused:
                raise ContractPausedError("proposal creation is paused")

            rules.validate_proposal_input(title, description, quorum, approval_threshold)
            proposal_type = _coerce_choice(ProposalType, proposal_type, "proposal_type")
            window = rules.effective_voting_window(requested_window, config.min_voting_window)
            now = self._clock.now()
            closes_at = rules.close_timestamp(now, window)

            weight = self._weights.oracle_for(config).weight_of(proposer)
            if weight < config.creation_threshold:
                raise InsufficientVotingPowerError(
                    f"{proposer} holds {weight} voting power, "
                    f"{config.creation_threshold} required to propose"
                )

            proposal_id = self._ledger.allocate_id()
            self._ledger.save_proposal(
                Proposal(
                    id=proposal_id,
                    title=title,
                    description=description,
                    proposal_type=proposal_type,
                    proposer=proposer,
                    created_at=now,
                    closes_at=closes_at,
                    status=ProposalStatus.ACTIVE,
                    upvotes=0,
                    downvotes=0,
                    quorum=quorum,
                    approval_threshold=approval_threshold,
                )
            )
            pending.append(events.proposal_created(proposal_id, proposer))

        get_logger("governance").info(
            "proposal_created",
            proposal_id=proposal_id,
            proposer=proposer,
            closes_at=closes_at,
            window=window,
        )
        return proposal_id

    def cast_vote(self, voter: str, proposal_id: int, direction: VoteDirection) -> VoteRecord:
        with self._transaction() as pending:
            self._gate.require_auth(voter, "cast_vote")
            config = self._config_store.load()
            if config.paused:
                raise ContractPausedError("voting is paused")
            direction = _coerce_choice(VoteDirection, direction, "direction")

            proposal = self._ledger.get_proposal(proposal_id)
            if proposal.status != ProposalStatus.ACTIVE:
                raise ProposalNotActiveError(f"proposal {proposal_id} is {proposal.status.value}")
            now = self._clock.now()
            if now > proposal.closes_at:
                raise VotingEndedError(
                    f"voting on proposal {proposal_id} closed at {proposal.closes_at}"
                )
            if self._ledger.has_voted(proposal_id, voter):
                raise AlreadyVotedError(f"{voter} already voted on proposal {proposal_id}")

            weight = self._weights.oracle_for(config).weight_of(voter)
            if direction.is_upvote:
                tallied = proposal.with_tally(
                    upvotes=rules.checked_add(proposal.upvotes, weight),
                    downvotes=proposal.downvotes,
                )
            else:
                tallied = proposal.with_tally(
                    upvotes=proposal.upvotes,
                    downvotes=rules.checked_add(proposal.downvotes, weight),
                )

            vote = VoteRecord(
                proposal_id=proposal_id,
                voter=voter,
                direction=direction,
                weight=weight,
                cast_at=now,
            )
            self._ledger.record_vote(vote)
            self._ledger.save_proposal(tallied)
            pending.append(events.vote_cast(proposal_id, voter, direction.is_upvote))

        get_logger("governance").info(
            "vote_cast",
            proposal_id=proposal_id,
            voter=voter,
            direction=direction.value,
            weight=weight,
        )
        return vote

    def finalize_proposal(self, proposal_id: int) -> ProposalStatus:
        with self._transaction() as pending:
            self._config_store.load()
            proposal = self._ledger.get_proposal(proposal_id)
            now = self._clock.now()
            if now <= proposal.closes_at:
                raise VotingNotEndedError(
                    f"voting on proposal {proposal_id} is open until {proposal.closes_at}"
                )
            if proposal.status != ProposalStatus.ACTIVE:
                raise ProposalNotActiveError(
                    f"proposal {proposal_id} was already finalized as {proposal.status.value}"
                )

            status = rules.decide_outcome(
                proposal.upvotes,
                proposal.downvotes,
                proposal.quorum,
                proposal.approval_threshold,
            )
            approved = status == ProposalStatus.PASSED
            self._ledger.save_proposal(proposal.with_status(status))
            pending.append(events.proposal_finalized(proposal_id, approved))

        get_logger("governance").info(
            "proposal_finalized",
            proposal_id=proposal_id,
            status=status.value,
            upvotes=proposal.upvotes,
            downvotes=proposal.downvotes,
            quorum=proposal.quorum,
        )
        return status

    def execute_proposal(self, proposal_id: int) -> Proposal:
        with self._transaction() as pending:
            config = self._config_store.load()
            proposal = self._ledger.get_proposal(proposal_id)
            if proposal.status != ProposalStatus.PASSED:
                raise ProposalNotPassedError(f"proposal {proposal_id} is {proposal.status.value}")
            if proposal.executed:
                raise ProposalAlreadyExecutedError(f"proposal {proposal_id} was already executed")

            unlocks_at = rules.execution_unlocks_at(proposal.closes_at, config.execution_delay)
            if self._clock.now() < unlocks_at:
                raise ExecutionDelayNotMetError(
                    f"proposal {proposal_id} cannot execute before {unlocks_at}"
                )

            executed = proposal.mark_executed()
            self._ledger.save_proposal(executed)
            pending.append(events.proposal_executed(proposal_id))

        get_logger("governance").info("proposal_executed", proposal_id=proposal_id)
        return executed
