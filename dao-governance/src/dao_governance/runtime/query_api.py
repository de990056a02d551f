from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from dao_governance.commands.context import build_weight_registry, open_engine
from dao_governance.config import AppSettings, get_settings
from dao_governance.domain.errors import ErrorCode, GovernanceError
from dao_governance.governance.queries import ProposalQueries
from dao_governance.observability.logging import get_logger
from dao_governance.storage.substrate import StateFileError

HTTP_STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.PROPOSAL_NOT_FOUND: 404,
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.NOT_INITIALIZED: 409,
}

QueriesProvider = Callable[[], ProposalQueries]


def build_query_app(
    settings: AppSettings,
    queries_provider: QueriesProvider,
    *,
    on_shutdown: Callable[[], None] | None = None,
) -> FastAPI:
    """Read-only HTTP view of the proposal registry.

    ``queries_provider`` is called once per request so file-backed state
    written by the CLI is picked up without restarting the server. Route
    handlers are plain functions because they read files and may query
    RPC nodes; FastAPI runs them in its threadpool.
    """

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        if on_shutdown is not None:
            await run_in_threadpool(on_shutdown)

    app = FastAPI(title=f"{settings.dao_name}-queries", version="0.1.0", lifespan=lifespan)

    @app.exception_handler(GovernanceError)
    async def governance_error_handler(_: Request, exc: GovernanceError) -> JSONResponse:
        return JSONResponse(
            status_code=HTTP_STATUS_BY_CODE.get(exc.code, 422),
            content=exc.as_dict(),
        )

    @app.exception_handler(StateFileError)
    async def state_file_error_handler(_: Request, exc: StateFileError) -> JSONResponse:
        get_logger("query_api").error("state_file_corrupted", path=str(exc.path))
        return JSONResponse(
            status_code=503,
            content={"code": "StateFileCorrupted", "message": str(exc)},
        )

    @app.get("/livez")
    def livez() -> dict[str, str]:
        return {"status": "ok", "dao_name": settings.dao_name}

    @app.get("/proposals")
    def list_proposals(page: int = 1, page_size: int = 20) -> dict[str, Any]:
        queries = queries_provider()
        proposals = queries.get_proposals_paginated(page, page_size)
        return {
            "page": page,
            "page_size": min(page_size, queries.max_page_size),
            "total": queries.get_total_proposal_count(),
            "proposals": [proposal.as_dict() for proposal in proposals],
        }

    @app.get("/proposals/count")
    def proposal_count() -> dict[str, int]:
        return {"total": queries_provider().get_total_proposal_count()}

    @app.get("/proposals/{proposal_id}")
    def get_proposal(proposal_id: int) -> dict[str, Any]:
        return queries_provider().get_proposal(proposal_id).as_dict()

    @app.get("/proposals/{proposal_id}/results")
    def proposal_results(proposal_id: int) -> dict[str, int]:
        upvotes, downvotes = queries_provider().get_proposal_results(proposal_id)
        return {"proposal_id": proposal_id, "upvotes": upvotes, "downvotes": downvotes}

    @app.get("/proposals/{proposal_id}/votes")
    def proposal_votes(proposal_id: int) -> list[dict[str, Any]]:
        votes = queries_provider().get_votes_for_proposal(proposal_id)
        return [vote.as_dict() for vote in votes]

    @app.get("/proposals/{proposal_id}/votes/{voter}")
    def proposal_vote(proposal_id: int, voter: str) -> dict[str, Any]:
        queries = queries_provider()
        vote = queries.get_vote(proposal_id, voter)
        return {
            "proposal_id": proposal_id,
            "voter": voter,
            "has_voted": queries.has_voted(proposal_id, voter),
            "vote": vote.as_dict() if vote is not None else None,
        }

    @app.get("/voting-power/{participant}")
    def voting_power(participant: str) -> dict[str, Any]:
        return {
            "participant": participant,
            "voting_power": queries_provider().get_voting_power(participant),
        }

    return app


def default_query_app() -> FastAPI:
    settings = get_settings()
    weights = build_weight_registry(settings)
    return build_query_app(
        settings,
        lambda: open_engine("query-api", settings, weights).engine.queries,
        on_shutdown=weights.close,
    )
