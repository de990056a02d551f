from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Protocol


class Clock(Protocol):
    def now(self) -> int:
        ...


class SystemClock:
    def now(self) -> int:
        return int(time.time())


@dataclass(slots=True)
class ManualClock:
    current: int = 0

    def now(self) -> int:
        return self.current

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("clock cannot move backwards")
        self.current += seconds
        return self.current

    def set(self, timestamp: int) -> None:
        if timestamp < self.current:
            raise ValueError("clock cannot move backwards")
        self.current = timestamp
