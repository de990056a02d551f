from __future__ import annotations

from collections.abc import Mapping

from solders.signature import Signature

from dao_governance.domain.errors import UnauthorizedError
from dao_governance.identity import auth_message
from dao_governance.observability.logging import get_logger
from dao_governance.solana.pubkeys import parse_pubkey
from dao_governance.storage.nonces import NonceLedger


class SignatureGate:
    """Identity gate backed by ed25519 signatures from the participant's Solana key.

    Each participant signs ``auth_message(action, participant, nonce,
    request_digest)`` with the keypair behind their public key. The digest
    binds the signature to one request's arguments and the nonce to one use:
    a verified signature consumes the participant's next nonce in
    ``nonces``, so a captured signature fails once it has been accepted.
    Run the check inside the same atomic block as the operation it guards
    so a rejected operation leaves the nonce unspent.
    """

    def __init__(
        self,
        signatures: Mapping[str, str],
        *,
        nonces: NonceLedger,
        nonce: int | None,
        request_digest: str = "",
    ) -> None:
        self._signatures = dict(signatures)
        self._nonces = nonces
        self._nonce = nonce
        self._request_digest = request_digest

    def require_auth(self, participant: str, action: str) -> None:
        logger = get_logger("identity")
        raw_signature = self._signatures.get(participant)
        if raw_signature is None:
            logger.warning("auth_missing_signature", participant=participant, action=action)
            raise UnauthorizedError(f"{action}: no signature supplied for {participant}")
        if self._nonce is None:
            logger.warning("auth_missing_nonce", participant=participant, action=action)
            raise UnauthorizedError(f"{action}: signed requests must carry a nonce")

        try:
            pubkey = parse_pubkey(participant, field_name="participant")
            signature = Signature.from_string(raw_signature)
        except ValueError as exc:
            logger.warning("auth_malformed_proof", participant=participant, action=action)
            raise UnauthorizedError(f"{action}: malformed identity proof: {exc}") from exc

        message = auth_message(action, participant, self._nonce, self._request_digest)
        if not signature.verify(pubkey, message):
            logger.warning("auth_signature_rejected", participant=participant, action=action)
            raise UnauthorizedError(f"{action}: signature does not match {participant}")

        try:
            self._nonces.consume(participant, self._nonce)
        except UnauthorizedError:
            logger.warning(
                "auth_nonce_rejected",
                participant=participant,
                action=action,
                nonce=self._nonce,
            )
            raise
