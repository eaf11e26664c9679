"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Authorization
  2xxx: Account substrate (balances, records)
  3xxx: Validation (malformed input, rejected before any state change)
  4xxx: State conflict (lifecycle violations)
  5xxx: Consistency (escrow/fee/close guards)
  9xxx: Arithmetic / System

Every error is terminal for the attempted operation: the unit of work is
rolled back and nothing is retried.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class AuthorizationError(AppError):
    """Identity mismatch between the caller and the record being acted on."""


class ValidationError(AppError):
    """Malformed input."""


class StateConflictError(AppError):
    """Operation not allowed in the record's current lifecycle state."""


class ConsistencyError(AppError):
    """A close/withdraw guard found stranded or missing funds."""


# --- 1xxx: Authorization ---

class InvalidCredentialsError(AuthorizationError):
    def __init__(self) -> None:
        super().__init__(1001, "Invalid or expired credentials", 401)


class UnauthorizedError(AuthorizationError):
    def __init__(self, detail: str = "Unauthorized") -> None:
        super().__init__(1002, detail, 403)


class AuthorityCannotBetError(AuthorizationError):
    def __init__(self) -> None:
        super().__init__(1003, "Authority cannot bet on own market", 403)


# --- 2xxx: Account substrate ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required} lamports, available {available} lamports",
            422,
        )


class AccountNotFoundError(AppError):
    def __init__(self, kind: str, address: str) -> None:
        super().__init__(2002, f"{kind} not found: {address}", 404)


class AccountAlreadyExistsError(AppError):
    def __init__(self, kind: str, address: str) -> None:
        super().__init__(2003, f"{kind} already exists: {address}", 409)


class InvalidIdentityError(AppError):
    def __init__(self, value: str) -> None:
        super().__init__(2004, f"Not a 32-byte base58 identity: {value!r}", 422)


class AirdropDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(2005, "Airdrop is disabled", 403)


# --- 3xxx: Validation ---

class InvalidSideError(ValidationError):
    def __init__(self, side: int) -> None:
        super().__init__(3001, f"Invalid side: {side}", 422)


class InvalidWinningSideError(ValidationError):
    def __init__(self, side: int) -> None:
        super().__init__(3002, f"Invalid winning side: {side}", 422)


class ZeroAmountError(ValidationError):
    def __init__(self) -> None:
        super().__init__(3003, "Zero amount not allowed", 422)


class LabelTooLongError(ValidationError):
    def __init__(self, field: str, length: int, limit: int) -> None:
        super().__init__(
            3004, f"Label or title too long: {field} is {length} bytes (max {limit})", 422
        )


class InvalidFeeError(ValidationError):
    def __init__(self, fee_bps: int, host_fee_bps: int) -> None:
        super().__init__(
            3005, f"Invalid fee bps: fee_bps={fee_bps}, host_fee_bps={host_fee_bps}", 422
        )


# --- 4xxx: State conflict ---

class MarketAlreadyResolvedError(StateConflictError):
    def __init__(self) -> None:
        super().__init__(4001, "Market already resolved", 409)


class MarketFrozenError(StateConflictError):
    def __init__(self) -> None:
        super().__init__(4002, "Market is frozen", 409)


class MarketNotFrozenError(StateConflictError):
    def __init__(self) -> None:
        super().__init__(4003, "Market not frozen", 409)


class MarketAlreadyFrozenError(StateConflictError):
    def __init__(self) -> None:
        super().__init__(4004, "Market already frozen", 409)


class MarketNotResolvedError(StateConflictError):
    def __init__(self) -> None:
        super().__init__(4005, "Market not resolved", 409)


class AlreadyClaimedError(StateConflictError):
    def __init__(self) -> None:
        super().__init__(4006, "Ticket already claimed", 409)


class TicketSideMismatchError(StateConflictError):
    def __init__(self, detail: str = "Ticket side mismatch") -> None:
        super().__init__(4007, detail, 409)


class TicketMarketMismatchError(StateConflictError):
    def __init__(self) -> None:
        super().__init__(4008, "Ticket market mismatch", 409)


class CannotCloseActiveTicketError(StateConflictError):
    def __init__(self) -> None:
        super().__init__(4009, "Cannot close active ticket", 409)


# --- 5xxx: Consistency ---

class InsufficientEscrowError(ConsistencyError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            5001,
            f"Insufficient escrow: required {required} lamports, available {available} lamports",
            409,
        )


class FeesRemainingError(ConsistencyError):
    def __init__(self, fees_accrued: int) -> None:
        super().__init__(5002, f"Fees still accrued: {fees_accrued} lamports", 409)


class OutstandingLamportsError(ConsistencyError):
    def __init__(self, balance: int, rent_minimum: int) -> None:
        super().__init__(
            5003,
            f"Outstanding lamports remain: balance {balance}, rent minimum {rent_minimum}",
            409,
        )


# --- 9xxx: Arithmetic / System ---

class MathOverflowError(AppError):
    def __init__(self, detail: str = "Math overflow") -> None:
        super().__init__(9001, detail, 422)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
