from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from dao_governance.domain.errors import InvalidContractAddressError, InvalidInputError


@dataclass(slots=True, frozen=True)
class GovernanceConfig:
    admin: str
    reputation_oracle: str
    badge_oracle: str
    creation_threshold: int
    execution_delay: int
    min_voting_window: int
    paused: bool = False

    def ensure_valid(self) -> None:
        if not self.admin.strip():
            raise InvalidInputError("admin is required")
        for field_name, address in (
            ("reputation_oracle", self.reputation_oracle),
            ("badge_oracle", self.badge_oracle),
        ):
            if not address.strip():
                raise InvalidContractAddressError(f"{field_name} is required")
            if address == self.admin:
                raise InvalidContractAddressError(f"{field_name} must differ from admin")
        for field_name, value in (
            ("creation_threshold", self.creation_threshold),
            ("execution_delay", self.execution_delay),
            ("min_voting_window", self.min_voting_window),
        ):
            if isinstance(value, bool) or value < 0:
                raise InvalidInputError(f"{field_name} must be a non-negative integer")

    def updated(self, update: ConfigUpdate) -> GovernanceConfig:
        changes = {key: value for key, value in update.as_dict().items() if value is not None}
        return replace(self, **changes)

    def as_dict(self) -> dict[str, Any]:
        return {
            "admin": self.admin,
            "reputation_oracle": self.reputation_oracle,
            "badge_oracle": self.badge_oracle,
            "creation_threshold": self.creation_threshold,
            "execution_delay": self.execution_delay,
            "min_voting_window": self.min_voting_window,
            "paused": self.paused,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GovernanceConfig:
        return cls(
            admin=str(data["admin"]),
            reputation_oracle=str(data["reputation_oracle"]),
            badge_oracle=str(data["badge_oracle"]),
            creation_threshold=int(data["creation_threshold"]),
            execution_delay=int(data["execution_delay"]),
            min_voting_window=int(data["min_voting_window"]),
            paused=bool(data.get("paused", False)),
        )


@dataclass(slots=True, frozen=True)
class ConfigUpdate:
    """Partial configuration change; ``None`` leaves a field untouched."""

    admin: str | None = None
    reputation_oracle: str | None = None
    badge_oracle: str | None = None
    creation_threshold: int | None = None
    execution_delay: int | None = None
    min_voting_window: int | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "admin": self.admin,
            "reputation_oracle": self.reputation_oracle,
            "badge_oracle": self.badge_oracle,
            "creation_threshold": self.creation_threshold,
            "execution_delay": self.execution_delay,
            "min_voting_window": self.min_voting_window,
        }
