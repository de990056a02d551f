from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

JsonDict = dict[str, Any]


class CommandStatus(StrEnum):
    OK = "ok"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class CommandResult:
    command: str
    status: CommandStatus
    details: JsonDict = field(default_factory=dict)

    def to_dict(self) -> JsonDict:
        return {
            "command": self.command,
            "status": self.status.value,
            "details": self.details,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))

    @property
    def exit_code(self) -> int:
        return 1 if self.status == CommandStatus.FAILED else 0

    @classmethod
    def failure(cls, command: str, error: str, message: str) -> CommandResult:
        """Rejected command.

        ``error`` is an ``ErrorCode`` value, ``InvalidArgument`` or ``StateFileCorrupted``.
        """
        return cls(
            command=command,
            status=CommandStatus.FAILED,
            details={"error": error, "message": message},
        )
