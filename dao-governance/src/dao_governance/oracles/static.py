from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path

from dao_governance.oracles.base import WeightSourceRegistry


class StaticWeightSource:
    """Fixed participant weights, e.g. an exported reputation snapshot."""

    def __init__(self, weights: Mapping[str, int]) -> None:
        for participant, weight in weights.items():
            if isinstance(weight, bool) or not isinstance(weight, int) or weight < 0:
                raise ValueError(f"weight for {participant} must be a non-negative integer")
        self._weights = dict(weights)

    def weight_of(self, participant: str) -> int:
        return self._weights.get(participant, 0)


def load_weight_registry(path: Path) -> WeightSourceRegistry:
    """Read ``{"<source address>": {"<participant>": weight}}`` into a registry."""
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a JSON object keyed by source address")

    registry = WeightSourceRegistry()
    for address, weights in raw.items():
        if not isinstance(weights, dict):
            raise ValueError(f"{path}: weights for {address} must be a JSON object")
        registry.register(str(address), StaticWeightSource(weights))
    return registry
