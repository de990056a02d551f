from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from dao_governance.domain.errors import UnauthorizedError


class IdentityGate(Protocol):
    def require_auth(self, participant: str, action: str) -> None:
        """Raise ``UnauthorizedError`` unless the caller controls ``participant``."""
        ...


def auth_message(
    action: str, participant: str, nonce: int, request_digest: str = ""
) -> bytes:
    return f"dao-governance|{action}|{participant}|{nonce}|{request_digest}".encode()


class TrustedCallerGate:
    """Gate for front ends that authenticated their callers out of band."""

    def __init__(self, authenticated: Iterable[str]) -> None:
        self._authenticated = frozenset(authenticated)

    def require_auth(self, participant: str, action: str) -> None:
        if participant not in self._authenticated:
            raise UnauthorizedError(f"{action}: caller is not authenticated as {participant}")
