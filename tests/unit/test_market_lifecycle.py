"""Tests for sb_market.domain.lifecycle: initialize and freeze."""

import pytest
from solders.pubkey import Pubkey

from config.settings import settings
from src.sb_account.domain.addressing import market_address
from src.sb_account.domain.models import AuthorityMeta
from src.sb_common.enums import MarketPhase
from src.sb_common.errors import (
    InvalidFeeError,
    LabelTooLongError,
    MarketAlreadyFrozenError,
    MarketAlreadyResolvedError,
    MathOverflowError,
)
from src.sb_common.lamports import U16_MAX
from src.sb_market.domain.lifecycle import freeze_market, initialize_market

AUTHORITY = str(Pubkey.from_bytes(bytes([7]) * 32))


def _make_meta(next_cycle: int = 0) -> AuthorityMeta:
    return AuthorityMeta(address="meta", authority=AUTHORITY, next_cycle=next_cycle, bump=255)


class TestInitializeMarket:
    def test_defaults(self) -> None:
        meta = _make_meta()
        market = initialize_market(meta, "Title", "Yes", "No", None, settings.PROGRAM_ID)

        assert market.fee_bps == 20
        assert market.host_fee_bps == 670
        assert market.cycle == 0
        assert market.winning_side is None
        assert market.phase is MarketPhase.OPEN
        assert (market.pool_yes, market.pool_no, market.fees_accrued) == (0, 0, 0)
        assert meta.next_cycle == 1

    def test_address_derived_from_cycle(self) -> None:
        meta = _make_meta(next_cycle=5)
        market = initialize_market(meta, "T", "Y", "N", 0, settings.PROGRAM_ID)
        assert (market.address, market.bump) == market_address(AUTHORITY, 5, settings.PROGRAM_ID)

    def test_custom_fee(self) -> None:
        market = initialize_market(_make_meta(), "T", "Y", "N", 100, settings.PROGRAM_ID)
        assert market.fee_bps == 100

    def test_fee_over_limit_rejected_before_text(self) -> None:
        meta = _make_meta()
        with pytest.raises(InvalidFeeError):
            initialize_market(meta, "x" * 65, "Y", "N", 9_500, settings.PROGRAM_ID)
        assert meta.next_cycle == 0

    def test_title_too_long(self) -> None:
        with pytest.raises(LabelTooLongError):
            initialize_market(_make_meta(), "x" * 65, "Y", "N", None, settings.PROGRAM_ID)

    def test_title_limit_counts_bytes(self) -> None:
        # 33 two-byte characters = 66 bytes
        with pytest.raises(LabelTooLongError):
            initialize_market(_make_meta(), "é" * 33, "Y", "N", None, settings.PROGRAM_ID)

    def test_label_at_limit_accepted(self) -> None:
        market = initialize_market(_make_meta(), "T", "y" * 32, "n" * 32, None, settings.PROGRAM_ID)
        assert market.label_yes == "y" * 32

    def test_label_too_long(self) -> None:
        with pytest.raises(LabelTooLongError):
            initialize_market(_make_meta(), "T", "Y", "n" * 33, None, settings.PROGRAM_ID)

    def test_cycle_overflow(self) -> None:
        meta = _make_meta(next_cycle=U16_MAX)
        with pytest.raises(MathOverflowError):
            initialize_market(meta, "T", "Y", "N", None, settings.PROGRAM_ID)
        assert meta.next_cycle == U16_MAX


class TestFreezeMarket:
    def test_freeze(self) -> None:
        market = initialize_market(_make_meta(), "T", "Y", "N", None, settings.PROGRAM_ID)
        freeze_market(market)
        assert market.frozen
        assert market.phase is MarketPhase.FROZEN

    def test_freeze_twice(self) -> None:
        market = initialize_market(_make_meta(), "T", "Y", "N", None, settings.PROGRAM_ID)
        freeze_market(market)
        with pytest.raises(MarketAlreadyFrozenError):
            freeze_market(market)

    def test_freeze_resolved(self) -> None:
        market = initialize_market(_make_meta(), "T", "Y", "N", None, settings.PROGRAM_ID)
        market.frozen = True
        market.resolved = True
        with pytest.raises(MarketAlreadyResolvedError):
            freeze_market(market)
