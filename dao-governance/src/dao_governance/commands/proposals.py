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
from dao_governance.domain.proposal import ProposalType, VoteDirection
from dao_governance.types import CommandResult, CommandStatus


def _coerce_direction(raw_value: object) -> VoteDirection | None:
    if isinstance(raw_value, VoteDirection):
        return raw_value

    if isinstance(raw_value, bool):
        return VoteDirection.UP if raw_value else VoteDirection.DOWN

    if isinstance(raw_value, str):
        normalized = raw_value.strip().lower()
        if normalized in {"up", "upvote", "yes", "approve"}:
            return VoteDirection.UP
        if normalized in {"down", "downvote", "no", "deny"}:
            return VoteDirection.DOWN

    return None


def run_create_proposal(args: Namespace, settings: AppSettings) -> CommandResult:
    command = "create-proposal"
    try:
        proposer = participant_arg(args, "proposer", settings)
        proposal_type = ProposalType(str(getattr(args, "proposal_type", "")).strip())
        payload = {
            "proposer": proposer,
            "title": str(getattr(args, "title", "")),
            "description": str(getattr(args, "description", "")),
            "proposal_type": proposal_type,
            "requested_window": int_arg(args, "voting_window"),
            "quorum": int_arg(args, "quorum"),
            "approval_threshold": int_arg(args, "approval_threshold"),
        }
    except ValueError as exc:
        return invalid_argument(command, exc)

    try:
        with open_context(
            command,
            settings,
            caller=proposer,
            signature=getattr(args, "signature", None),
            nonce=getattr(args, "nonce", None),
            payload=payload,
        ) as context:
            proposal_id = context.engine.create_proposal(**payload)
            proposal = context.engine.queries.get_proposal(proposal_id)
    except GovernanceError as exc:
        return governance_failure(command, exc)

    return CommandResult(
        command=command,
        status=CommandStatus.OK,
        details={
            "proposal_id": proposal_id,
            "proposal": proposal.as_dict(),
            "events": context.emitted(),
        },
    )


def run_cast_vote(args: Namespace, settings: AppSettings) -> CommandResult:
    command = "cast-vote"
    direction = _coerce_direction(getattr(args, "direction", None))
    if direction is None:
        return CommandResult.failure(command, "InvalidArgument", "direction must be up or down")

    try:
        voter = participant_arg(args, "voter", settings)
        proposal_id = int_arg(args, "proposal_id", minimum=1)
    except ValueError as exc:
        return invalid_argument(command, exc)

    try:
        with open_context(
            command,
            settings,
            caller=voter,
            signature=getattr(args, "signature", None),
            nonce=getattr(args, "nonce", None),
            payload={"voter": voter, "proposal_id": proposal_id, "direction": direction.value},
        ) as context:
            vote = context.engine.cast_vote(voter, proposal_id, direction)
            upvotes, downvotes = context.engine.queries.get_proposal_results(proposal_id)
    except GovernanceError as exc:
        return governance_failure(command, exc)

    return CommandResult(
        command=command,
        status=CommandStatus.OK,
        details={
            "vote": vote.as_dict(),
            "upvotes": upvotes,
            "downvotes": downvotes,
            "events": context.emitted(),
        },
    )


def run_finalize_proposal(args: Namespace, settings: AppSettings) -> CommandResult:
    command = "finalize-proposal"
    try:
        proposal_id = int_arg(args, "proposal_id", minimum=1)
    except ValueError as exc:
        return invalid_argument(command, exc)

    try:
        with open_context(command, settings) as context:
            status = context.engine.finalize_proposal(proposal_id)
    except GovernanceError as exc:
        return governance_failure(command, exc)

    return CommandResult(
        command=command,
        status=CommandStatus.OK,
        details={
            "proposal_id": proposal_id,
            "proposal_status": status.value,
            "events": context.emitted(),
        },
    )


def run_execute_proposal(args: Namespace, settings: AppSettings) -> CommandResult:
    command = "execute-proposal"
    try:
        proposal_id = int_arg(args, "proposal_id", minimum=1)
    except ValueError as exc:
        return invalid_argument(command, exc)

    try:
        with open_context(command, settings) as context:
            proposal = context.engine.execute_proposal(proposal_id)
    except GovernanceError as exc:
        return governance_failure(command, exc)

    return CommandResult(
        command=command,
        status=CommandStatus.OK,
        details={"proposal": proposal.as_dict(), "events": context.emitted()},
    )
