"""Capability checks: who may act on a record.

Each operation names the identity it requires; the caller's identity comes
from the bearer token. A mismatch raises UnauthorizedError (1002) before
anything is mutated.
"""

from config.settings import settings
from src.sb_common.errors import UnauthorizedError
from src.sb_market.domain.models import Market


def assert_market_operator(market: Market, identity: str) -> None:
    """Freeze and resolve are reserved for the market's authority."""
    if market.authority != identity:
        raise UnauthorizedError("Only the market authority may perform this action")


def assert_platform_host(identity: str) -> None:
    """Fee withdrawal and market closing are reserved for the host identity."""
    if identity != settings.HOST_IDENTITY:
        raise UnauthorizedError("Only the platform host may perform this action")
