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
from dao_governance.domain.governance_config import ConfigUpdate
from dao_governance.types import CommandResult, CommandStatus


def _optional_int(args: Namespace, name: str) -> int | None:
    if getattr(args, name, None) is None:
        return None
    return int_arg(args, name, minimum=0)


def _optional_str(args: Namespace, name: str) -> str | None:
    raw_value = getattr(args, name, None)
    if raw_value is None:
        return None
    return str(raw_value).strip()


def run_initialize(args: Namespace, settings: AppSettings) -> CommandResult:
    command = "initialize"
    try:
        admin = participant_arg(args, "admin", settings)
        payload = {
            "admin": admin,
            "reputation_oracle": str(getattr(args, "reputation_oracle", "")).strip(),
            "badge_oracle": str(getattr(args, "badge_oracle", "")).strip(),
            "creation_threshold": int_arg(args, "creation_threshold", minimum=0),
            "execution_delay": int_arg(args, "execution_delay", minimum=0),
            "min_voting_window": int_arg(args, "min_voting_window", minimum=0),
        }
    except ValueError as exc:
        return invalid_argument(command, exc)

    try:
        with open_context(
            command,
            settings,
            caller=admin,
            signature=getattr(args, "signature", None),
            nonce=getattr(args, "nonce", None),
            payload=payload,
        ) as context:
            config = context.engine.initialize(**payload)
    except GovernanceError as exc:
        return governance_failure(command, exc)

    return CommandResult(
        command=command,
        status=CommandStatus.OK,
        details={"config": config.as_dict(), "events": context.emitted()},
    )


def run_update_config(args: Namespace, settings: AppSettings) -> CommandResult:
    command = "update-config"
    try:
        caller = participant_arg(args, "caller", settings)
        new_admin = _optional_str(args, "new_admin")
        if new_admin is not None and settings.require_signatures:
            new_admin = participant_arg(args, "new_admin", settings)
        update = ConfigUpdate(
            admin=new_admin,
            reputation_oracle=_optional_str(args, "reputation_oracle"),
            badge_oracle=_optional_str(args, "badge_oracle"),
            creation_threshold=_optional_int(args, "creation_threshold"),
            execution_delay=_optional_int(args, "execution_delay"),
            min_voting_window=_optional_int(args, "min_voting_window"),
        )
    except ValueError as exc:
        return invalid_argument(command, exc)

    try:
        with open_context(
            command,
            settings,
            caller=caller,
            signature=getattr(args, "signature", None),
            nonce=getattr(args, "nonce", None),
            payload={"caller": caller, **update.as_dict()},
        ) as context:
            config = context.engine.update_config(caller, update)
    except GovernanceError as exc:
        return governance_failure(command, exc)

    return CommandResult(
        command=command,
        status=CommandStatus.OK,
        details={"config": config.as_dict(), "events": context.emitted()},
    )


def _run_set_paused(command: str, paused: bool, args: Namespace, settings: AppSettings) -> CommandResult:
    try:
        caller = participant_arg(args, "caller", settings)
    except ValueError as exc:
        return invalid_argument(command, exc)

    try:
        with open_context(
            command,
            settings,
            caller=caller,
            signature=getattr(args, "signature", None),
            nonce=getattr(args, "nonce", None),
            payload={"caller": caller, "paused": paused},
        ) as context:
            config = context.engine.set_paused(caller, paused)
    except GovernanceError as exc:
        return governance_failure(command, exc)

    return CommandResult(
        command=command,
        status=CommandStatus.OK,
        details={"paused": config.paused, "events": context.emitted()},
    )


def run_pause(args: Namespace, settings: AppSettings) -> CommandResult:
    return _run_set_paused("pause", True, args, settings)


def run_unpause(args: Namespace, settings: AppSettings) -> CommandResult:
    return _run_set_paused("unpause", False, args, settings)
