from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

from solana.rpc.async_api import AsyncClient

from dao_governance.config import AppSettings

T = TypeVar("T")


class RpcClientFactory:
    """Thin factory for AsyncClient to keep adapter construction deterministic."""

    def __init__(self, settings: AppSettings) -> None:
        self._settings = settings

    def create(self) -> AsyncClient:
        return AsyncClient(
            self._settings.solana_rpc_url,
            timeout=self._settings.solana_rpc_timeout,
        )

    def session(self) -> RpcSession:
        return RpcSession(self.create())


class RpcSession:
    """Drives one AsyncClient from synchronous callers.

    Every request runs on the same private event loop so the client's
    connection pool stays bound to one loop. Calls are serialised, which
    lets the FastAPI threadpool share a single session.
    """

    def __init__(self, client: AsyncClient) -> None:
        self._client = client
        self._runner = asyncio.Runner()
        self._lock = threading.Lock()
        self._closed = False

    def call(self, request: Callable[[AsyncClient], Coroutine[Any, Any, T]]) -> T:
        with self._lock:
            if self._closed:
                raise RuntimeError("rpc session is closed")
            return self._runner.run(request(self._client))

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            try:
                self._runner.run(self._client.close())
            finally:
                self._runner.close()
