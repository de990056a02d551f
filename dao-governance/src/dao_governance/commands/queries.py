from __future__ import annotations

from argparse import Namespace

from dao_governance.commands.context import (
    governance_failure,
    int_arg,
    invalid_argument,
    open_context,
    participant_arg,
)
from dao_governance.config import AppSettings
from dao_governance.domain.errors import GovernanceError
from dao_governance.storage.nonces import NonceLedger
from dao_governance.storage.substrate import JsonFileStorage
from dao_governance.types import CommandResult, CommandStatus


def run_get_proposal(args: Namespace, settings: AppSettings) -> CommandResult:
    command = "get-proposal"
    try:
        proposal_id = int_arg(args, "proposal_id", minimum=1)
    except ValueError as exc:
        return invalid_argument(command, exc)

    try:
        with open_context(command, settings) as context:
            proposal = context.engine.queries.get_proposal(proposal_id)
            votes = context.engine.queries.get_votes_for_proposal(proposal_id)
    except GovernanceError as exc:
        return governance_failure(command, exc)

    return CommandResult(
        command=command,
        status=CommandStatus.OK,
        details={"proposal": proposal.as_dict(), "votes": [vote.as_dict() for vote in votes]},
    )


def run_list_proposals(args: Namespace, settings: AppSettings) -> CommandResult:
    command = "list-proposals"
    try:
        with open_context(command, settings) as context:
            queries = context.engine.queries
            if getattr(args, "all", False):
                proposals = queries.get_all_proposals()
                page_info: dict[str, int] = {}
            else:
                page = int_arg(args, "page")
                page_size = int_arg(args, "page_size")
                proposals = queries.get_proposals_paginated(page, page_size)
                page_info = {"page": page, "page_size": min(page_size, queries.max_page_size)}
            total = queries.get_total_proposal_count()
    except ValueError as exc:
        return invalid_argument(command, exc)
    except GovernanceError as exc:
        return governance_failure(command, exc)

    return CommandResult(
        command=command,
        status=CommandStatus.OK,
        details={
            **page_info,
            "total": total,
            "proposals": [proposal.as_dict() for proposal in proposals],
        },
    )


def run_proposal_results(args: Namespace, settings: AppSettings) -> CommandResult:
    command = "proposal-results"
    try:
        proposal_id = int_arg(args, "proposal_id", minimum=1)
    except ValueError as exc:
        return invalid_argument(command, exc)

    try:
        with open_context(command, settings) as context:
            upvotes, downvotes = context.engine.queries.get_proposal_results(proposal_id)
    except GovernanceError as exc:
        return governance_failure(command, exc)

    return CommandResult(
        command=command,
        status=CommandStatus.OK,
        details={"proposal_id": proposal_id, "upvotes": upvotes, "downvotes": downvotes},
    )


def run_has_voted(args: Namespace, settings: AppSettings) -> CommandResult:
    command = "has-voted"
    try:
        proposal_id = int_arg(args, "proposal_id", minimum=1)
        voter = participant_arg(args, "voter", settings)
    except ValueError as exc:
        return invalid_argument(command, exc)

    with open_context(command, settings) as context:
        voted = context.engine.queries.has_voted(proposal_id, voter)
    return CommandResult(
        command=command,
        status=CommandStatus.OK,
        details={"proposal_id": proposal_id, "voter": voter, "has_voted": voted},
    )


def run_voting_power(args: Namespace, settings: AppSettings) -> CommandResult:
    command = "voting-power"
    try:
        participant = participant_arg(args, "participant", settings)
    except ValueError as exc:
        return invalid_argument(command, exc)

    try:
        with open_context(command, settings) as context:
            weight = context.engine.queries.get_voting_power(participant)
    except GovernanceError as exc:
        return governance_failure(command, exc)

    return CommandResult(
        command=command,
        status=CommandStatus.OK,
        details={"participant": participant, "voting_power": weight},
    )


def run_next_nonce(args: Namespace, settings: AppSettings) -> CommandResult:
    """Nonce the participant must sign into their next request."""
    command = "next-nonce"
    try:
        participant = participant_arg(args, "participant", settings)
    except ValueError as exc:
        return invalid_argument(command, exc)

    nonces = NonceLedger(JsonFileStorage(settings.state_path))
    return CommandResult(
        command=command,
        status=CommandStatus.OK,
        details={"participant": participant, "nonce": nonces.next_nonce(participant)},
    )
