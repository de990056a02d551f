"""Command handlers for the DAO governance CLI."""

from dao_governance.commands.admin import (
    run_initialize,
    run_pause,
    run_unpause,
    run_update_config,
)
from dao_governance.commands.proposals import (
    run_cast_vote,
    run_create_proposal,
    run_execute_proposal,
    run_finalize_proposal,
)
from dao_governance.commands.queries import (
    run_get_proposal,
    run_has_voted,
    run_list_proposals,
    run_next_nonce,
    run_proposal_results,
    run_voting_power,
)

__all__ = [
    "run_cast_vote",
    "run_create_proposal",
    "run_execute_proposal",
    "run_finalize_proposal",
    "run_get_proposal",
    "run_has_voted",
    "run_initialize",
    "run_list_proposals",
    "run_next_nonce",
    "run_pause",
    "run_proposal_results",
    "run_unpause",
    "run_update_config",
    "run_voting_power",
]
