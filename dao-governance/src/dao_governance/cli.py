from __future__ import annotations

import json
from argparse import ArgumentParser, Namespace
from collections.abc import Callable, Sequence

from dao_governance.commands import (
    run_cast_vote,
    run_create_proposal,
    run_execute_proposal,
    run_finalize_proposal,
    run_get_proposal,
    run_has_voted,
    run_initialize,
    run_list_proposals,
    run_next_nonce,
    run_pause,
    run_proposal_results,
    run_unpause,
    run_update_config,
    run_voting_power,
)
from dao_governance.config import AppSettings, get_settings
from dao_governance.domain.proposal import ProposalType
from dao_governance.observability.logging import configure_logging, get_logger
from dao_governance.storage.substrate import StateFileError
from dao_governance.types import CommandResult

CommandHandler = Callable[[Namespace, AppSettings], CommandResult]

COMMAND_HANDLERS: dict[str, CommandHandler] = {
    "initialize": run_initialize,
    "update-config": run_update_config,
    "pause": run_pause,
    "unpause": run_unpause,
    "create-proposal": run_create_proposal,
    "cast-vote": run_cast_vote,
    "finalize-proposal": run_finalize_proposal,
    "execute-proposal": run_execute_proposal,
    "get-proposal": run_get_proposal,
    "list-proposals": run_list_proposals,
    "proposal-results": run_proposal_results,
    "has-voted": run_has_voted,
    "voting-power": run_voting_power,
    "next-nonce": run_next_nonce,
}


def _add_signature(parser: ArgumentParser) -> None:
    parser.add_argument(
        "--signature",
        default=None,
        help="base58 ed25519 signature over the request by the acting participant",
    )
    parser.add_argument(
        "--nonce",
        type=int,
        default=None,
        help="the signer's next nonce, as reported by next-nonce",
    )


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog="dao-governance", description="Weighted DAO governance CLI")
    parser.add_argument("--json", action="store_true", help="emit machine-readable JSON output")

    subparsers = parser.add_subparsers(dest="command", required=True)

    initialize = subparsers.add_parser("initialize")
    initialize.add_argument("--admin", required=True)
    initialize.add_argument("--reputation-oracle", required=True)
    initialize.add_argument("--badge-oracle", required=True)
    initialize.add_argument("--creation-threshold", required=True, type=int)
    initialize.add_argument("--execution-delay", required=True, type=int)
    initialize.add_argument("--min-voting-window", required=True, type=int)
    _add_signature(initialize)

    update = subparsers.add_parser("update-config")
    update.add_argument("--caller", required=True)
    update.add_argument("--new-admin", default=None)
    update.add_argument("--reputation-oracle", default=None)
    update.add_argument("--badge-oracle", default=None)
    update.add_argument("--creation-threshold", type=int, default=None)
    update.add_argument("--execution-delay", type=int, default=None)
    update.add_argument("--min-voting-window", type=int, default=None)
    _add_signature(update)

    for name in ("pause", "unpause"):
        toggle = subparsers.add_parser(name)
        toggle.add_argument("--caller", required=True)
        _add_signature(toggle)

    create = subparsers.add_parser("create-proposal")
    create.add_argument("--proposer", required=True)
    create.add_argument("--title", required=True)
    create.add_argument("--description", required=True)
    create.add_argument(
        "--type",
        dest="proposal_type",
        default=ProposalType.OTHER.value,
        choices=[proposal_type.value for proposal_type in ProposalType],
    )
    create.add_argument("--voting-window", required=True, type=int)
    create.add_argument("--quorum", required=True, type=int)
    create.add_argument("--approval-threshold", required=True, type=int)
    _add_signature(create)

    vote = subparsers.add_parser("cast-vote")
    vote.add_argument("--proposal-id", required=True, type=int)
    vote.add_argument("--voter", required=True)
    vote_group = vote.add_mutually_exclusive_group(required=True)
    vote_group.add_argument("--up", dest="direction", action="store_const", const="up")
    vote_group.add_argument("--down", dest="direction", action="store_const", const="down")
    _add_signature(vote)

    for name in ("finalize-proposal", "execute-proposal", "get-proposal", "proposal-results"):
        single = subparsers.add_parser(name)
        single.add_argument("--proposal-id", required=True, type=int)

    listing = subparsers.add_parser("list-proposals")
    listing.add_argument("--page", type=int, default=1)
    listing.add_argument("--page-size", type=int, default=20)
    listing.add_argument("--all", action="store_true", help="return every proposal in id order")

    voted = subparsers.add_parser("has-voted")
    voted.add_argument("--proposal-id", required=True, type=int)
    voted.add_argument("--voter", required=True)

    power = subparsers.add_parser("voting-power")
    power.add_argument("--participant", required=True)

    nonce = subparsers.add_parser("next-nonce")
    nonce.add_argument("--participant", required=True)

    return parser


def _emit_result(result: CommandResult, *, as_json: bool) -> None:
    if as_json:
        print(result.to_json())
        return

    print(f"{result.command}: {result.status.value}")
    if result.details:
        print(json.dumps(result.details, indent=2, sort_keys=True))


def entrypoint(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    settings = get_settings()
    configure_logging(settings.log_level)

    command = str(args.command)
    handler = COMMAND_HANDLERS[command]
    try:
        result = handler(args, settings)
    except StateFileError as exc:
        get_logger("cli").error("state_file_corrupted", command=command, path=str(exc.path))
        result = CommandResult.failure(command, "StateFileCorrupted", str(exc))
    _emit_result(result, as_json=bool(args.json))
    return result.exit_code


if __name__ == "__main__":
    raise SystemExit(entrypoint())
