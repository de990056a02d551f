from __future__ import annotations

from solana.exceptions import SolanaRpcException
from solana.rpc.types import TokenAccountOpts

from dao_governance.oracles.base import WeightSourceError
from dao_governance.solana.pubkeys import parse_pubkey
from dao_governance.solana.rpc_client import RpcSession


class SplTokenBalanceSource:
    """Weight equal to the raw amount of one SPL mint held across the owner's accounts.

    Badge collections minted as SPL tokens report one unit per badge.
    """

    def __init__(self, rpc: RpcSession, mint: str) -> None:
        self._rpc = rpc
        self._mint = parse_pubkey(mint, field_name="mint")

    @property
    def mint(self) -> str:
        return str(self._mint)

    def weight_of(self, participant: str) -> int:
        try:
            owner = parse_pubkey(participant, field_name="participant")
        except ValueError as exc:
            raise WeightSourceError(str(exc)) from exc

        opts = TokenAccountOpts(mint=self._mint)
        try:
            response = self._rpc.call(
                lambda client: client.get_token_accounts_by_owner_json_parsed(owner, opts)
            )
        except SolanaRpcException as exc:
            raise WeightSourceError(f"token balance lookup failed: {exc}") from exc

        total = 0
        for keyed_account in response.value:
            try:
                amount = keyed_account.account.data.parsed["info"]["tokenAmount"]["amount"]
                total += int(amount)
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                raise WeightSourceError(f"unexpected token account layout: {exc}") from exc
        return total

    def close(self) -> None:
        self._rpc.close()
