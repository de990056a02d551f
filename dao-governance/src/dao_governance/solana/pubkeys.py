from __future__ import annotations

from solders.pubkey import Pubkey


def parse_pubkey(raw_value: str, *, field_name: str) -> Pubkey:
    candidate = raw_value.strip()
    if not candidate:
        raise ValueError(f"{field_name} is required")

    try:
        return Pubkey.from_string(candidate)
    except ValueError as exc:
        raise ValueError(f"{field_name} must be a valid Solana public key") from exc


def normalize_participant(raw_value: str, *, field_name: str) -> str:
    return str(parse_pubkey(raw_value, field_name=field_name))
