"""Fixed-point fee model — floor division, basis points over 10000.

Only profit is fee-able: a winner's principal always comes back in full.
Accrued fees are later split between the market operator ("authority") and
the platform ("host") in proportion fee_bps : host_fee_bps.
"""

from dataclasses import dataclass

from src.sb_common.errors import InvalidFeeError
from src.sb_common.lamports import BPS_DENOMINATOR, checked_sub, mul_div_floor


@dataclass(frozen=True)
class FeeSplit:
    authority_share: int
    host_share: int


def validate_fee_config(fee_bps: int, host_fee_bps: int) -> None:
    """Each rate and their sum must stay within 10000 bps."""
    if not (0 <= fee_bps <= BPS_DENOMINATOR) or not (0 <= host_fee_bps <= BPS_DENOMINATOR):
        raise InvalidFeeError(fee_bps, host_fee_bps)
    if fee_bps + host_fee_bps > BPS_DENOMINATOR:
        raise InvalidFeeError(fee_bps, host_fee_bps)


def calc_profit_fee(profit: int, fee_bps: int, host_fee_bps: int) -> int:
    """floor(profit x (fee_bps + host_fee_bps) / 10000); 0 when both rates are 0."""
    total_bps = fee_bps + host_fee_bps
    if total_bps == 0:
        return 0
    return mul_div_floor(profit, total_bps, BPS_DENOMINATOR)


def split_fees(amount: int, fee_bps: int, host_fee_bps: int) -> FeeSplit:
    """Split an amount operator:host by fee_bps:host_fee_bps.

    The operator share is floored, so the host receives the remainder. With
    both rates at zero the whole amount goes to the operator.
    """
    total_bps = fee_bps + host_fee_bps
    if total_bps == 0:
        return FeeSplit(authority_share=amount, host_share=0)
    authority_share = mul_div_floor(amount, fee_bps, total_bps)
    return FeeSplit(authority_share=authority_share, host_share=checked_sub(amount, authority_share))
