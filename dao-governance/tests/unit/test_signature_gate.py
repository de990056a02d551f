import pytest
from solders.keypair import Keypair

from dao_governance.domain.errors import InvalidContractAddressError, UnauthorizedError
from dao_governance.domain.events import InMemoryEventLog
from dao_governance.domain.governance_config import ConfigUpdate
from dao_governance.governance.engine import GovernanceEngine
from dao_governance.identity import TrustedCallerGate, auth_message
from dao_governance.oracles.base import WeightSourceRegistry
from dao_governance.solana.signatures import SignatureGate
from dao_governance.storage.nonces import NonceLedger
from dao_governance.storage.substrate import InMemoryStorage

DIGEST = "4f1c0a"


def _signed(keypair: Keypair, action: str, nonce: int = 1, digest: str = DIGEST) -> str:
    message = auth_message(action, str(keypair.pubkey()), nonce, digest)
    return str(keypair.sign_message(message))


def _gate(
    signatures: dict[str, str],
    storage: InMemoryStorage,
    nonce: int | None = 1,
    digest: str = DIGEST,
) -> SignatureGate:
    return SignatureGate(
        signatures,
        nonces=NonceLedger(storage),
        nonce=nonce,
        request_digest=digest,
    )


def test_valid_signature_is_accepted_and_consumes_nonce() -> None:
    keypair = Keypair()
    participant = str(keypair.pubkey())
    storage = InMemoryStorage()

    _gate({participant: _signed(keypair, "cast_vote")}, storage).require_auth(
        participant, "cast_vote"
    )

    assert NonceLedger(storage).last_used(participant) == 1
    assert NonceLedger(storage).next_nonce(participant) == 2


def test_missing_signature_is_rejected() -> None:
    participant = str(Keypair().pubkey())

    with pytest.raises(UnauthorizedError):
        _gate({}, InMemoryStorage()).require_auth(participant, "cast_vote")


def test_missing_nonce_is_rejected() -> None:
    keypair = Keypair()
    participant = str(keypair.pubkey())
    gate = _gate({participant: _signed(keypair, "cast_vote")}, InMemoryStorage(), nonce=None)

    with pytest.raises(UnauthorizedError):
        gate.require_auth(participant, "cast_vote")


def test_signature_for_other_action_is_rejected() -> None:
    keypair = Keypair()
    participant = str(keypair.pubkey())
    gate = _gate({participant: _signed(keypair, "cast_vote")}, InMemoryStorage())

    with pytest.raises(UnauthorizedError):
        gate.require_auth(participant, "create_proposal")


def test_signature_for_other_request_is_rejected() -> None:
    keypair = Keypair()
    participant = str(keypair.pubkey())
    gate = _gate(
        {participant: _signed(keypair, "cast_vote", digest="other-request")},
        InMemoryStorage(),
    )

    with pytest.raises(UnauthorizedError):
        gate.require_auth(participant, "cast_vote")


def test_signature_by_another_key_is_rejected() -> None:
    victim = str(Keypair().pubkey())
    forged = str(Keypair().sign_message(auth_message("cast_vote", victim, 1, DIGEST)))

    with pytest.raises(UnauthorizedError):
        _gate({victim: forged}, InMemoryStorage()).require_auth(victim, "cast_vote")


def test_malformed_signature_is_rejected() -> None:
    participant = str(Keypair().pubkey())
    gate = _gate({participant: "not-a-signature"}, InMemoryStorage())

    with pytest.raises(UnauthorizedError):
        gate.require_auth(participant, "cast_vote")


def test_replayed_signature_is_rejected() -> None:
    keypair = Keypair()
    participant = str(keypair.pubkey())
    storage = InMemoryStorage()
    signature = _signed(keypair, "set_paused")

    _gate({participant: signature}, storage).require_auth(participant, "set_paused")

    with pytest.raises(UnauthorizedError):
        _gate({participant: signature}, storage).require_auth(participant, "set_paused")
    assert NonceLedger(storage).last_used(participant) == 1


def test_nonce_must_be_the_next_one() -> None:
    keypair = Keypair()
    participant = str(keypair.pubkey())
    storage = InMemoryStorage()
    skipped = _signed(keypair, "cast_vote", nonce=2)

    with pytest.raises(UnauthorizedError):
        _gate({participant: skipped}, storage, nonce=2).require_auth(participant, "cast_vote")
    assert NonceLedger(storage).last_used(participant) == 0


def test_nonces_are_tracked_per_participant() -> None:
    first, second = Keypair(), Keypair()
    storage = InMemoryStorage()

    for keypair in (first, second):
        participant = str(keypair.pubkey())
        _gate({participant: _signed(keypair, "cast_vote")}, storage).require_auth(
            participant, "cast_vote"
        )

    assert NonceLedger(storage).last_used(str(first.pubkey())) == 1
    assert NonceLedger(storage).last_used(str(second.pubkey())) == 1


def test_rejected_operation_leaves_nonce_unspent() -> None:
    admin = Keypair()
    admin_key = str(admin.pubkey())
    storage = InMemoryStorage()

    def engine(nonce: int, action: str) -> GovernanceEngine:
        gate = _gate({admin_key: _signed(admin, action, nonce=nonce)}, storage, nonce=nonce)
        return GovernanceEngine(storage, gate, WeightSourceRegistry(), InMemoryEventLog())

    engine(1, "initialize").initialize(admin_key, "reputation", "badges", 0, 0, 60)

    with pytest.raises(InvalidContractAddressError):
        engine(2, "update_config").update_config(admin_key, ConfigUpdate(badge_oracle=admin_key))
    assert NonceLedger(storage).last_used(admin_key) == 1

    updated = engine(2, "update_config").update_config(admin_key, ConfigUpdate(execution_delay=5))
    assert updated.execution_delay == 5
    assert NonceLedger(storage).last_used(admin_key) == 2


def test_trusted_caller_gate() -> None:
    gate = TrustedCallerGate(["alice"])

    gate.require_auth("alice", "cast_vote")
    with pytest.raises(UnauthorizedError):
        gate.require_auth("bob", "cast_vote")
