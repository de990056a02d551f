import pytest

from dao_governance.cli import COMMAND_HANDLERS, build_parser
from dao_governance.types import CommandResult, CommandStatus


def test_required_command_surface_is_present() -> None:
    required = {
        "initialize",
        "update-config",
        "pause",
        "unpause",
        "create-proposal",
        "cast-vote",
        "finalize-proposal",
        "execute-proposal",
        "get-proposal",
        "list-proposals",
        "proposal-results",
        "has-voted",
        "voting-power",
        "next-nonce",
    }

    assert required.issubset(COMMAND_HANDLERS.keys())


def test_cast_vote_requires_a_direction() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["cast-vote", "--proposal-id", "1", "--voter", "bob"])


def test_cast_vote_direction_flags() -> None:
    args = build_parser().parse_args(
        ["cast-vote", "--proposal-id", "1", "--voter", "bob", "--down"]
    )

    assert args.direction == "down"
    assert args.proposal_id == 1


def test_create_proposal_defaults_to_other_type() -> None:
    args = build_parser().parse_args(
        [
            "create-proposal",
            "--proposer",
            "alice",
            "--title",
            "t",
            "--description",
            "d",
            "--voting-window",
            "3600",
            "--quorum",
            "1",
            "--approval-threshold",
            "50",
        ]
    )

    assert args.proposal_type == "Other"


def test_create_proposal_rejects_unknown_type() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["create-proposal", "--type", "Treasury"])


def test_failure_result_shape() -> None:
    result = CommandResult.failure("cast-vote", "AlreadyVoted", "bob already voted on proposal 1")

    assert result.exit_code == 1
    assert result.to_json() == (
        '{"command":"cast-vote","details":{"error":"AlreadyVoted",'
        '"message":"bob already voted on proposal 1"},"status":"failed"}'
    )
    assert CommandResult("has-voted", CommandStatus.OK).exit_code == 0


def test_signed_commands_accept_a_nonce() -> None:
    parser = build_parser()

    args = parser.parse_args(["pause", "--caller", "admin", "--signature", "sig", "--nonce", "3"])
    unsigned = parser.parse_args(["unpause", "--caller", "admin"])

    assert args.nonce == 3
    assert unsigned.nonce is None
