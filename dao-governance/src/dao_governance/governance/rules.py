"""Pure arithmetic behind the proposal state machine.

Nothing here reads storage or the clock; the engine feeds in persisted values
and the current time and commits whatever these functions decide.
"""

from __future__ import annotations

from dao_governance.domain.errors import (
    ExecutionFailedError,
    InvalidInputError,
    InvalidTimestampError,
)
from dao_governance.domain.proposal import MAX_WEIGHT, ProposalStatus

MAX_VOTING_WINDOW = 365 * 24 * 60 * 60
MAX_TIMESTAMP = 2**64 - 1
MAX_TITLE_LENGTH = 128
MAX_DESCRIPTION_LENGTH = 4096


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_proposal_input(
    title: str,
    description: str,
    quorum: int,
    approval_threshold: int,
) -> None:
    if not title.strip():
        raise InvalidInputError("title is required")
    if len(title) > MAX_TITLE_LENGTH:
        raise InvalidInputError(f"title must be at most {MAX_TITLE_LENGTH} characters")
    if not description.strip():
        raise InvalidInputError("description is required")
    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise InvalidInputError(
            f"description must be at most {MAX_DESCRIPTION_LENGTH} characters"
        )
    if not _is_int(approval_threshold) or not 0 < approval_threshold <= 100:
        raise InvalidInputError("approval threshold must be within (0, 100]")
    if not _is_int(quorum) or quorum <= 0:
        raise InvalidInputError("quorum must be a positive integer")
    if quorum > MAX_WEIGHT:
        raise InvalidInputError("quorum exceeds the weight range")


def effective_voting_window(requested_window: int, min_voting_window: int) -> int:
    if not _is_int(requested_window) or requested_window <= 0:
        raise InvalidTimestampError("voting window must be a positive number of seconds")
    if min_voting_window > MAX_VOTING_WINDOW:
        raise InvalidTimestampError(
            f"minimum voting window {min_voting_window}s exceeds the {MAX_VOTING_WINDOW}s cap"
        )
    return min(max(requested_window, min_voting_window, 1), MAX_VOTING_WINDOW)


def close_timestamp(created_at: int, window: int) -> int:
    closes_at = created_at + window
    if closes_at > MAX_TIMESTAMP:
        raise InvalidTimestampError("voting window ends beyond the timestamp range")
    return closes_at


def checked_add(tally: int, weight: int) -> int:
    result = tally + weight
    if result > MAX_WEIGHT:
        raise ExecutionFailedError("vote tally overflow")
    return result


def approval_percentage(upvotes: int, total: int) -> int:
    if total <= 0:
        return 0
    return (upvotes * 100) // total


def decide_outcome(
    upvotes: int,
    downvotes: int,
    quorum: int,
    approval_threshold: int,
) -> ProposalStatus:
    total = upvotes + downvotes
    if total == 0 or total < quorum:
        return ProposalStatus.REJECTED
    if approval_percentage(upvotes, total) >= approval_threshold:
        return ProposalStatus.PASSED
    return ProposalStatus.REJECTED


def execution_unlocks_at(closes_at: int, execution_delay: int) -> int:
    return closes_at + execution_delay
