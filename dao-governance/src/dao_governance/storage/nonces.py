from __future__ import annotations

from dao_governance.domain.errors import UnauthorizedError
from dao_governance.storage.keys import NonceKey
from dao_governance.storage.substrate import Storage


class NonceLedger:
    """Per-participant counter of signed requests already accepted.

    A signed request must carry exactly ``last_used + 1``; consuming it
    stores the new value, so the same signature never verifies twice.
    """

    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    def last_used(self, participant: str) -> int:
        raw = self._storage.get(NonceKey(participant))
        return int(raw) if raw is not None else 0

    def next_nonce(self, participant: str) -> int:
        return self.last_used(participant) + 1

    def consume(self, participant: str, nonce: int) -> None:
        expected = self.next_nonce(participant)
        if nonce != expected:
            raise UnauthorizedError(
                f"stale or out-of-order nonce {nonce} for {participant}, expected {expected}"
            )
        self._storage.set(NonceKey(participant), nonce)
