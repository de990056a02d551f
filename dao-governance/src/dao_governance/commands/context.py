from __future__ import annotations

import hashlib
import json
from argparse import Namespace
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from dao_governance.config import AppSettings
from dao_governance.domain.errors import GovernanceError
from dao_governance.domain.events import InMemoryEventLog
from dao_governance.governance.engine import GovernanceEngine
from dao_governance.identity import IdentityGate, TrustedCallerGate
from dao_governance.observability.logging import get_logger
from dao_governance.oracles.base import WeightSourceRegistry
from dao_governance.oracles.static import load_weight_registry
from dao_governance.solana.pubkeys import normalize_participant
from dao_governance.solana.rpc_client import RpcClientFactory
from dao_governance.solana.signatures import SignatureGate
from dao_governance.solana.token_balance import SplTokenBalanceSource
from dao_governance.storage.nonces import NonceLedger
from dao_governance.storage.substrate import JsonFileStorage
from dao_governance.types import CommandResult


def request_digest(command: str, payload: Mapping[str, Any]) -> str:
    """Digest a signed request binds to; clients sign over the same value."""
    canonical = json.dumps(
        {"command": command, "payload": dict(payload)},
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def build_weight_registry(settings: AppSettings) -> WeightSourceRegistry:
    """Weight sources for one process; call ``close()`` on the result when done."""
    registry = (
        load_weight_registry(settings.weights_path)
        if settings.weights_path is not None
        else WeightSourceRegistry()
    )
    if settings.badge_mint:
        rpc = RpcClientFactory(settings).session()
        registry.register(settings.badge_mint, SplTokenBalanceSource(rpc, settings.badge_mint))
    return registry


@dataclass(slots=True)
class CommandContext:
    engine: GovernanceEngine
    event_log: InMemoryEventLog

    def emitted(self) -> list[dict[str, Any]]:
        return [event.as_dict() for event in self.event_log.events]


def open_engine(
    command: str,
    settings: AppSettings,
    weights: WeightSourceRegistry,
    *,
    caller: str | None = None,
    signature: str | None = None,
    nonce: int | None = None,
    payload: Mapping[str, Any] | None = None,
) -> CommandContext:
    """Engine over freshly loaded state, sharing long-lived weight sources."""
    storage = JsonFileStorage(settings.state_path)
    gate: IdentityGate
    if settings.require_signatures:
        signatures = {caller: signature} if caller and signature else {}
        gate = SignatureGate(
            signatures,
            nonces=NonceLedger(storage),
            nonce=nonce,
            request_digest=request_digest(command, payload or {}),
        )
    else:
        gate = TrustedCallerGate([caller] if caller else [])

    event_log = InMemoryEventLog()
    engine = GovernanceEngine(
        storage,
        gate,
        weights,
        event_log,
        max_page_size=settings.max_page_size,
    )
    return CommandContext(engine=engine, event_log=event_log)


@contextmanager
def open_context(
    command: str,
    settings: AppSettings,
    *,
    caller: str | None = None,
    signature: str | None = None,
    nonce: int | None = None,
    payload: Mapping[str, Any] | None = None,
) -> Iterator[CommandContext]:
    weights = build_weight_registry(settings)
    try:
        yield open_engine(
            command,
            settings,
            weights,
            caller=caller,
            signature=signature,
            nonce=nonce,
            payload=payload,
        )
    finally:
        weights.close()


def participant_arg(args: Namespace, name: str, settings: AppSettings) -> str:
    raw_value = str(getattr(args, name, "") or "").strip()
    if settings.require_signatures:
        return normalize_participant(raw_value, field_name=name)
    if not raw_value:
        raise ValueError(f"{name} is required")
    return raw_value


def int_arg(args: Namespace, name: str, *, minimum: int | None = None) -> int:
    raw_value = getattr(args, name, None)
    if isinstance(raw_value, bool):
        raise ValueError(f"{name} must be an integer")
    try:
        value = int(raw_value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if minimum is not None and value < minimum:
        raise ValueError(f"{name} must be at least {minimum}")
    return value


def invalid_argument(command: str, exc: ValueError) -> CommandResult:
    return CommandResult.failure(command, "InvalidArgument", str(exc))


def governance_failure(command: str, exc: GovernanceError) -> CommandResult:
    get_logger("cli").warning("command_rejected", command=command, code=exc.code.value)
    return CommandResult.failure(command, exc.code.value, exc.message)
