from __future__ import annotations

from collections.abc import Iterator

import pytest
import structlog

from dao_governance.config import get_settings
from dao_governance.domain.events import InMemoryEventLog
from dao_governance.governance.clock import ManualClock
from dao_governance.governance.engine import GovernanceEngine
from dao_governance.identity import TrustedCallerGate
from dao_governance.oracles.base import WeightSourceRegistry
from dao_governance.storage.substrate import InMemoryStorage

ADMIN = "admin"
REPUTATION_ORACLE = "reputation-oracle"
BADGE_ORACLE = "badge-oracle"
PARTICIPANTS = ("admin", "alice", "bob", "carol", "dave", "mallory")

GENESIS = 1_700_000_000
CREATION_THRESHOLD = 100
EXECUTION_DELAY = 86_400
MIN_VOTING_WINDOW = 3_600


class FakeWeightSource:
    def __init__(self, weights: dict[str, int] | None = None) -> None:
        self.weights: dict[str, int] = dict(weights or {})
        self.calls: list[str] = []

    def weight_of(self, participant: str) -> int:
        self.calls.append(participant)
        return self.weights.get(participant, 0)


@pytest.fixture(autouse=True)
def _reset_global_state() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(GENESIS)


@pytest.fixture
def event_log() -> InMemoryEventLog:
    return InMemoryEventLog()


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def reputation() -> FakeWeightSource:
    return FakeWeightSource({"admin": 10, "alice": 100, "bob": 55, "carol": 55, "dave": 40})


@pytest.fixture
def badges() -> FakeWeightSource:
    return FakeWeightSource({"alice": 5})


@pytest.fixture
def engine(
    storage: InMemoryStorage,
    event_log: InMemoryEventLog,
    clock: ManualClock,
    reputation: FakeWeightSource,
    badges: FakeWeightSource,
) -> GovernanceEngine:
    registry = WeightSourceRegistry({REPUTATION_ORACLE: reputation, BADGE_ORACLE: badges})
    return GovernanceEngine(
        storage,
        TrustedCallerGate(PARTICIPANTS),
        registry,
        event_log,
        clock=clock,
    )


@pytest.fixture
def governance(engine: GovernanceEngine) -> GovernanceEngine:
    engine.initialize(
        ADMIN,
        REPUTATION_ORACLE,
        BADGE_ORACLE,
        CREATION_THRESHOLD,
        EXECUTION_DELAY,
        MIN_VOTING_WINDOW,
    )
    return engine
