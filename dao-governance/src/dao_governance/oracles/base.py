from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable

from dao_governance.domain.errors import ExecutionFailedError
from dao_governance.domain.governance_config import GovernanceConfig
from dao_governance.domain.proposal import MAX_WEIGHT
from dao_governance.observability.logging import get_logger


class WeightSourceError(Exception):
    """A weight source could not answer; the engine counts it as zero weight."""


class WeightSource(Protocol):
    def weight_of(self, participant: str) -> int:
        ...


@runtime_checkable
class ClosableSource(Protocol):
    def close(self) -> None:
        ...


class VotingPowerOracle(Protocol):
    def weight_of(self, participant: str) -> int:
        ...


class CompositeVotingPowerOracle:
    """Adds the weights reported by each configured source."""

    def __init__(self, sources: Sequence[tuple[str, WeightSource | None]]) -> None:
        self._sources = list(sources)

    def weight_of(self, participant: str) -> int:
        logger = get_logger("voting_power")
        total = 0
        for address, source in self._sources:
            if source is None:
                logger.warning("weight_source_unknown", source=address, participant=participant)
                continue
            try:
                weight = source.weight_of(participant)
            except WeightSourceError as exc:
                logger.warning(
                    "weight_source_failed",
                    source=address,
                    participant=participant,
                    error=str(exc),
                )
                continue
            if isinstance(weight, bool) or not isinstance(weight, int) or weight < 0:
                logger.warning(
                    "weight_source_invalid",
                    source=address,
                    participant=participant,
                    weight=repr(weight),
                )
                continue
            total += weight

        if total > MAX_WEIGHT:
            raise ExecutionFailedError(f"voting power of {participant} overflows the weight range")
        return total


class WeightSourceRegistry:
    """Resolves the oracle addresses stored in configuration to live sources."""

    def __init__(self, sources: Mapping[str, WeightSource] | None = None) -> None:
        self._sources: dict[str, WeightSource] = dict(sources or {})

    def register(self, address: str, source: WeightSource) -> None:
        self._sources[address] = source

    def resolve(self, address: str) -> WeightSource | None:
        return self._sources.get(address)

    def oracle_for(self, config: GovernanceConfig) -> CompositeVotingPowerOracle:
        return CompositeVotingPowerOracle(
            [
                (config.reputation_oracle, self.resolve(config.reputation_oracle)),
                (config.badge_oracle, self.resolve(config.badge_oracle)),
            ]
        )

    def close(self) -> None:
        """Release network resources held by registered sources."""
        for source in self._sources.values():
            if isinstance(source, ClosableSource):
                source.close()
