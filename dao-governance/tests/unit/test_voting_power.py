import json
from collections.abc import Callable, Iterator
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest
from solana.exceptions import SolanaRpcException
from solders.pubkey import Pubkey

from dao_governance.domain.errors import ExecutionFailedError
from dao_governance.domain.governance_config import GovernanceConfig
from dao_governance.domain.proposal import MAX_WEIGHT
from dao_governance.oracles.base import (
    CompositeVotingPowerOracle,
    WeightSourceError,
    WeightSourceRegistry,
)
from dao_governance.oracles.static import StaticWeightSource, load_weight_registry
from dao_governance.solana.rpc_client import RpcSession
from dao_governance.solana.token_balance import SplTokenBalanceSource

OWNER = "11111111111111111111111111111111"
MINT = str(Pubkey.default())


class FailingSource:
    def weight_of(self, participant: str) -> int:
        raise WeightSourceError("oracle offline")


class FixedSource:
    def __init__(self, weight: Any) -> None:
        self._weight = weight

    def weight_of(self, participant: str) -> int:
        return self._weight


def _token_account(amount: str) -> SimpleNamespace:
    parsed = {"info": {"tokenAmount": {"amount": amount}}}
    return SimpleNamespace(account=SimpleNamespace(data=SimpleNamespace(parsed=parsed)))


class FakeTokenClient:
    def __init__(self, amounts: list[str] | None = None, error: Exception | None = None) -> None:
        self._amounts = amounts or []
        self._error = error
        self.requests: list[tuple[Pubkey, Any]] = []
        self.closed = False

    async def get_token_accounts_by_owner_json_parsed(
        self, owner: Pubkey, opts: Any
    ) -> SimpleNamespace:
        self.requests.append((owner, opts))
        if self._error is not None:
            raise self._error
        return SimpleNamespace(value=[_token_account(amount) for amount in self._amounts])

    async def close(self) -> None:
        self.closed = True


TokenSourceFactory = Callable[[FakeTokenClient], SplTokenBalanceSource]


@pytest.fixture
def token_source() -> Iterator[TokenSourceFactory]:
    sources: list[SplTokenBalanceSource] = []

    def build(client: FakeTokenClient) -> SplTokenBalanceSource:
        source = SplTokenBalanceSource(RpcSession(client), MINT)  # type: ignore[arg-type]
        sources.append(source)
        return source

    yield build
    for source in sources:
        source.close()


def test_composite_adds_source_weights() -> None:
    oracle = CompositeVotingPowerOracle(
        [("reputation", StaticWeightSource({"alice": 70})), ("badges", FixedSource(3))]
    )

    assert oracle.weight_of("alice") == 73
    assert oracle.weight_of("bob") == 3


def test_failing_source_counts_as_zero() -> None:
    oracle = CompositeVotingPowerOracle(
        [("reputation", FailingSource()), ("badges", FixedSource(3))]
    )

    assert oracle.weight_of("alice") == 3


def test_unknown_and_invalid_sources_count_as_zero() -> None:
    oracle = CompositeVotingPowerOracle(
        [("missing", None), ("negative", FixedSource(-5)), ("flag", FixedSource(True))]
    )

    assert oracle.weight_of("alice") == 0


def test_combined_weight_overflow_is_an_error() -> None:
    oracle = CompositeVotingPowerOracle([("a", FixedSource(MAX_WEIGHT)), ("b", FixedSource(1))])

    with pytest.raises(ExecutionFailedError):
        oracle.weight_of("alice")


def test_registry_resolves_configured_addresses() -> None:
    registry = WeightSourceRegistry({"rep": StaticWeightSource({"alice": 9})})
    registry.register("badge", StaticWeightSource({"alice": 1}))
    config = GovernanceConfig(
        admin="admin",
        reputation_oracle="rep",
        badge_oracle="badge",
        creation_threshold=0,
        execution_delay=0,
        min_voting_window=1,
    )

    assert registry.resolve("nowhere") is None
    assert registry.oracle_for(config).weight_of("alice") == 10


def test_static_source_rejects_negative_weights() -> None:
    with pytest.raises(ValueError):
        StaticWeightSource({"alice": -1})


def test_load_weight_registry(tmp_path: Path) -> None:
    path = tmp_path / "weights.json"
    path.write_text(json.dumps({"rep": {"alice": 40}, "badge": {"alice": 2, "bob": 1}}))

    registry = load_weight_registry(path)

    rep = registry.resolve("rep")
    badge = registry.resolve("badge")
    assert rep is not None and rep.weight_of("alice") == 40
    assert badge is not None and badge.weight_of("bob") == 1


def test_load_weight_registry_rejects_bad_layout(tmp_path: Path) -> None:
    path = tmp_path / "weights.json"
    path.write_text(json.dumps({"rep": [1, 2]}))

    with pytest.raises(ValueError):
        load_weight_registry(path)


def test_token_balance_sums_accounts(token_source: TokenSourceFactory) -> None:
    client = FakeTokenClient(["2", "3"])
    source = token_source(client)

    assert source.weight_of(OWNER) == 5
    owner, opts = client.requests[0]
    assert owner == Pubkey.from_string(OWNER)
    assert opts.mint == Pubkey.from_string(MINT)


def test_token_balance_without_accounts_is_zero(token_source: TokenSourceFactory) -> None:
    assert token_source(FakeTokenClient([])).weight_of(OWNER) == 0


def test_token_balance_rpc_failure_is_source_error(token_source: TokenSourceFactory) -> None:
    error = SolanaRpcException(
        ConnectionError("node unreachable"),
        FakeTokenClient.get_token_accounts_by_owner_json_parsed,
    )
    source = token_source(FakeTokenClient(error=error))

    with pytest.raises(WeightSourceError):
        source.weight_of(OWNER)


def test_token_balance_rejects_non_pubkey_participant(token_source: TokenSourceFactory) -> None:
    client = FakeTokenClient(["1"])

    with pytest.raises(WeightSourceError):
        token_source(client).weight_of("alice")
    assert client.requests == []


def test_token_balance_bad_layout_is_source_error(token_source: TokenSourceFactory) -> None:
    source = token_source(FakeTokenClient(["not-a-number"]))

    with pytest.raises(WeightSourceError):
        source.weight_of(OWNER)


def test_rpc_session_reuses_one_client_until_closed() -> None:
    client = FakeTokenClient(["4"])
    session = RpcSession(client)  # type: ignore[arg-type]
    source = SplTokenBalanceSource(session, MINT)

    assert source.weight_of(OWNER) == 4
    assert source.weight_of(OWNER) == 4
    assert len(client.requests) == 2

    session.close()
    session.close()

    assert client.closed is True
    with pytest.raises(RuntimeError):
        source.weight_of(OWNER)


def test_registry_close_releases_rpc_sources() -> None:
    client = FakeTokenClient()
    registry = WeightSourceRegistry({"rep": StaticWeightSource({"alice": 1})})
    registry.register(MINT, SplTokenBalanceSource(RpcSession(client), MINT))  # type: ignore[arg-type]

    registry.close()

    assert client.closed is True
