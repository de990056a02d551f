from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    ALREADY_INITIALIZED = "AlreadyInitialized"
    NOT_INITIALIZED = "NotInitialized"
    CONTRACT_PAUSED = "ContractPaused"
    UNAUTHORIZED = "Unauthorized"
    INVALID_INPUT = "InvalidInput"
    INVALID_CONTRACT_ADDRESS = "InvalidContractAddress"
    INVALID_TIMESTAMP = "InvalidTimestamp"
    INSUFFICIENT_VOTING_POWER = "InsufficientVotingPower"
    PROPOSAL_NOT_FOUND = "ProposalNotFound"
    PROPOSAL_NOT_ACTIVE = "ProposalNotActive"
    VOTING_ENDED = "VotingEnded"
    VOTING_NOT_ENDED = "VotingNotEnded"
    ALREADY_VOTED = "AlreadyVoted"
    VOTE_LIMIT_EXCEEDED = "VoteLimitExceeded"
    EXECUTION_FAILED = "ExecutionFailed"
    PROPOSAL_NOT_PASSED = "ProposalNotPassed"
    PROPOSAL_ALREADY_EXECUTED = "ProposalAlreadyExecuted"
    EXECUTION_DELAY_NOT_MET = "ExecutionDelayNotMet"


class GovernanceError(Exception):
    """Base class for every recoverable, caller-facing governance failure."""

    code: ErrorCode = ErrorCode.EXECUTION_FAILED

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def as_dict(self) -> dict[str, str]:
        return {"code": self.code.value, "message": self.message}


class AlreadyInitializedError(GovernanceError):
    code = ErrorCode.ALREADY_INITIALIZED


class NotInitializedError(GovernanceError):
    code = ErrorCode.NOT_INITIALIZED


class ContractPausedError(GovernanceError):
    code = ErrorCode.CONTRACT_PAUSED


class UnauthorizedError(GovernanceError):
    code = ErrorCode.UNAUTHORIZED


class InvalidInputError(GovernanceError):
    code = ErrorCode.INVALID_INPUT


class InvalidContractAddressError(GovernanceError):
    code = ErrorCode.INVALID_CONTRACT_ADDRESS


class InvalidTimestampError(GovernanceError):
    code = ErrorCode.INVALID_TIMESTAMP


class InsufficientVotingPowerError(GovernanceError):
    code = ErrorCode.INSUFFICIENT_VOTING_POWER


class ProposalNotFoundError(GovernanceError):
    code = ErrorCode.PROPOSAL_NOT_FOUND


class ProposalNotActiveError(GovernanceError):
    code = ErrorCode.PROPOSAL_NOT_ACTIVE


class VotingEndedError(GovernanceError):
    code = ErrorCode.VOTING_ENDED


class VotingNotEndedError(GovernanceError):
    code = ErrorCode.VOTING_NOT_ENDED


class AlreadyVotedError(GovernanceError):
    code = ErrorCode.ALREADY_VOTED


class VoteLimitExceededError(GovernanceError):
    code = ErrorCode.VOTE_LIMIT_EXCEEDED


class ExecutionFailedError(GovernanceError):
    code = ErrorCode.EXECUTION_FAILED


class ProposalNotPassedError(GovernanceError):
    code = ErrorCode.PROPOSAL_NOT_PASSED


class ProposalAlreadyExecutedError(GovernanceError):
    code = ErrorCode.PROPOSAL_ALREADY_EXECUTED


class ExecutionDelayNotMetError(GovernanceError):
    code = ErrorCode.EXECUTION_DELAY_NOT_MET
