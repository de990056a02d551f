from __future__ import annotations

from dao_governance.domain.errors import NotInitializedError
from dao_governance.domain.governance_config import GovernanceConfig
from dao_governance.storage.keys import ConfigKey
from dao_governance.storage.substrate import Storage


class ConfigurationStore:
    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    def is_initialized(self) -> bool:
        return self._storage.has(ConfigKey())

    def load(self) -> GovernanceConfig:
        raw = self._storage.get(ConfigKey())
        if raw is None:
            raise NotInitializedError("governance configuration has not been initialized")
        return GovernanceConfig.from_dict(raw)

    def save(self, config: GovernanceConfig) -> None:
        self._storage.set(ConfigKey(), config.as_dict())
