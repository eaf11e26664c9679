"""Derived addresses: deterministic record locations from (tag, seeds).

Addresses are program-derived: the highest bump in [255, 1] whose
sha256(seeds || bump || program_id || "ProgramDerivedAddress") is off the
ed25519 curve. The search is `Pubkey.find_program_address`; the bump is
stored on the record so the derivation can be re-checked on load.

Seed tuples:
  authority meta: ("authority_meta", authority)
  market:         ("market", authority, cycle as u16 little-endian)
  ticket:         ("ticket", market, user)
"""

import struct
from collections.abc import Sequence

from solders.pubkey import Pubkey

from src.sb_common.errors import InvalidIdentityError

AUTHORITY_META_TAG = b"authority_meta"
MARKET_TAG = b"market"
TICKET_TAG = b"ticket"


def parse_identity(identity: str) -> Pubkey:
    try:
        return Pubkey.from_string(identity)
    except ValueError:
        raise InvalidIdentityError(identity) from None


def identity_bytes(identity: str) -> bytes:
    """Decode a base58 identity into its 32 raw bytes."""
    return bytes(parse_identity(identity))


def _derive(seeds: Sequence[bytes], program_id: str) -> tuple[str, int]:
    address, bump = Pubkey.find_program_address(list(seeds), parse_identity(program_id))
    return str(address), bump


def authority_meta_seeds(authority: str) -> list[bytes]:
    return [AUTHORITY_META_TAG, identity_bytes(authority)]


def market_seeds(authority: str, cycle: int) -> list[bytes]:
    return [MARKET_TAG, identity_bytes(authority), struct.pack("<H", cycle)]


def ticket_seeds(market: str, user: str) -> list[bytes]:
    return [TICKET_TAG, identity_bytes(market), identity_bytes(user)]


def authority_meta_address(authority: str, program_id: str) -> tuple[str, int]:
    return _derive(authority_meta_seeds(authority), program_id)


def market_address(authority: str, cycle: int, program_id: str) -> tuple[str, int]:
    return _derive(market_seeds(authority, cycle), program_id)


def ticket_address(market: str, user: str, program_id: str) -> tuple[str, int]:
    return _derive(ticket_seeds(market, user), program_id)
