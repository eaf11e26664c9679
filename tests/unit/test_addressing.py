"""Tests for derived addresses and identity parsing."""

import pytest
from solders.pubkey import Pubkey

from config.settings import settings
from src.sb_account.domain.addressing import (
    AUTHORITY_META_TAG,
    MARKET_TAG,
    TICKET_TAG,
    authority_meta_address,
    identity_bytes,
    market_address,
    ticket_address,
)
from src.sb_common.errors import InvalidIdentityError

AUTHORITY = str(Pubkey.from_bytes(bytes([7]) * 32))
USER = str(Pubkey.from_bytes(bytes([9]) * 32))
PROGRAM = Pubkey.from_string(settings.PROGRAM_ID)


class TestIdentity:
    def test_decodes_to_raw_bytes(self) -> None:
        assert identity_bytes(AUTHORITY) == bytes([7]) * 32

    def test_wrong_length_rejected(self) -> None:
        # sixteen zero bytes
        with pytest.raises(InvalidIdentityError):
            identity_bytes("1" * 16)

    def test_not_base58_rejected(self) -> None:
        # 0, O, I and l are outside the base58 alphabet
        with pytest.raises(InvalidIdentityError):
            identity_bytes("0OIl" * 8)


class TestRecordAddresses:
    def test_meta_address_is_off_curve(self) -> None:
        address, bump = authority_meta_address(AUTHORITY, settings.PROGRAM_ID)
        assert 1 <= bump <= 255
        assert not Pubkey.from_string(address).is_on_curve()

    def test_meta_address_matches_seeds(self) -> None:
        address, bump = authority_meta_address(AUTHORITY, settings.PROGRAM_ID)
        expected = Pubkey.create_program_address(
            [AUTHORITY_META_TAG, bytes([7]) * 32, bytes([bump])], PROGRAM
        )
        assert address == str(expected)

    def test_one_meta_per_authority(self) -> None:
        a1, _ = authority_meta_address(AUTHORITY, settings.PROGRAM_ID)
        a2, _ = authority_meta_address(USER, settings.PROGRAM_ID)
        assert a1 != a2

    def test_market_address_depends_on_cycle(self) -> None:
        m0, _ = market_address(AUTHORITY, 0, settings.PROGRAM_ID)
        m1, _ = market_address(AUTHORITY, 1, settings.PROGRAM_ID)
        assert m0 != m1

    @pytest.mark.parametrize("cycle", [0, 1, 255, 258, 65535])
    def test_market_cycle_seed_is_u16_le(self, cycle: int) -> None:
        address, bump = market_address(AUTHORITY, cycle, settings.PROGRAM_ID)
        expected, expected_bump = Pubkey.find_program_address(
            [MARKET_TAG, bytes([7]) * 32, cycle.to_bytes(2, "little")], PROGRAM
        )
        assert (address, bump) == (str(expected), expected_bump)

    def test_ticket_address_per_user(self) -> None:
        market, _ = market_address(AUTHORITY, 0, settings.PROGRAM_ID)
        t1, _ = ticket_address(market, USER, settings.PROGRAM_ID)
        t2, _ = ticket_address(market, AUTHORITY, settings.PROGRAM_ID)
        assert t1 != t2

    def test_ticket_address_matches_seeds(self) -> None:
        market, _ = market_address(AUTHORITY, 0, settings.PROGRAM_ID)
        address, bump = ticket_address(market, USER, settings.PROGRAM_ID)
        expected, expected_bump = Pubkey.find_program_address(
            [TICKET_TAG, bytes(Pubkey.from_string(market)), bytes([9]) * 32], PROGRAM
        )
        assert (address, bump) == (str(expected), expected_bump)

    def test_invalid_authority_rejected(self) -> None:
        with pytest.raises(InvalidIdentityError):
            market_address("not-an-identity", 0, settings.PROGRAM_ID)
