"""
Error taxonomy for the Huddle protocol.

Public operations never raise for expected failures. They return a
(value, error) tuple where error is None on success or a HuddleError.
Collaborator exceptions (currency) are mapped to DEPENDENCY errors.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    """Broad failure category."""
    VALIDATION = "validation"        # Malformed input
    AUTHORIZATION = "authorization"  # Caller lacks the required role
    STATE = "state"                  # Invalid for the current lifecycle state
    CONFLICT = "conflict"            # Value too low, duplicates, limits
    DEPENDENCY = "dependency"        # Currency or verifier failure


class ErrorCode(Enum):
    """Specific failure, tagged with its kind."""

    # Validation
    INVALID_INPUT = ErrorKind.VALIDATION, "invalid input"
    INVALID_PROOF = ErrorKind.VALIDATION, "invalid social proof"
    HANDLE_TOO_LONG = ErrorKind.VALIDATION, "social handle too long"
    PROOF_TOO_LONG = ErrorKind.VALIDATION, "social proof too long"
    INVALID_TIME = ErrorKind.VALIDATION, "scheduled time must be in the future"
    INVALID_STARS = ErrorKind.VALIDATION, "stars out of range"

    # Authorization
    NOT_REGISTERED = ErrorKind.AUTHORIZATION, "host not registered"
    UNAUTHORIZED = ErrorKind.AUTHORIZATION, "caller is not the requested host"
    NOT_HOST = ErrorKind.AUTHORIZATION, "caller is not the huddle host"
    HOST_CANNOT_BID = ErrorKind.AUTHORIZATION, "hosts cannot bid on their own huddles"
    NOT_PARTICIPANT = ErrorKind.AUTHORIZATION, "rater and ratee must be host and winner"

    # State
    HUDDLE_NOT_FOUND = ErrorKind.STATE, "huddle not found"
    NOT_OPEN = ErrorKind.STATE, "huddle is not open"
    NOT_PENDING = ErrorKind.STATE, "huddle is not awaiting host acceptance"
    EXPIRED = ErrorKind.STATE, "huddle scheduled time has passed"
    TIME_NOT_REACHED = ErrorKind.STATE, "scheduled time not reached yet"
    NOT_CLOSED = ErrorKind.STATE, "huddle is not closed"
    ALREADY_CLAIMED = ErrorKind.STATE, "huddle already claimed"
    NO_WINNER = ErrorKind.STATE, "huddle closed without bids"
    HUDDLE_NOT_CLOSED = ErrorKind.STATE, "huddle must be closed before rating"

    # Conflict
    ALREADY_REGISTERED = ErrorKind.CONFLICT, "account already registered"
    BID_TOO_LOW = ErrorKind.CONFLICT, "bid is too low"
    ALREADY_RATED = ErrorKind.CONFLICT, "already rated"
    TOO_MANY_HUDDLES = ErrorKind.CONFLICT, "host has too many huddles"
    TOO_MANY_BIDS = ErrorKind.CONFLICT, "bidder has too many bids"

    # Dependency
    INSUFFICIENT_FUNDS = ErrorKind.DEPENDENCY, "insufficient balance to reserve bid"
    RELEASE_FAILED = ErrorKind.DEPENDENCY, "could not release surpassed bid"
    ROLLBACK_FAILED = ErrorKind.DEPENDENCY, "could not undo reservation after failed release"
    TRANSFER_FAILED = ErrorKind.DEPENDENCY, "could not transfer winning bid"
    VERIFIER_UNAVAILABLE = ErrorKind.DEPENDENCY, "social proof verifier failed"

    def __init__(self, kind: ErrorKind, description: str):
        self.kind = kind
        self.description = description


@dataclass(frozen=True)
class HuddleError:
    """
    A typed operation failure.

    Attributes:
        code: Specific failure
        message: Human readable detail
    """
    code: ErrorCode
    message: str = ""

    @property
    def kind(self) -> ErrorKind:
        return self.code.kind

    def __str__(self) -> str:
        detail = self.message or self.code.description
        return f"{self.code.name}: {detail}"


def fail(code: ErrorCode, message: str = "") -> HuddleError:
    """Build a HuddleError, defaulting the message to the code's description."""
    return HuddleError(code=code, message=message or code.description)


# =============================================================================
# Collaborator Exceptions
# =============================================================================


class CurrencyError(Exception):
    """Raised by a CurrencyService when a balance movement fails."""


class InsufficientBalance(CurrencyError):
    """Account lacks the free or reserved balance for the movement."""

    def __init__(self, account: str, needed: int, available: int):
        super().__init__(f"{account}: need {needed}, have {available}")
        self.account = account
        self.needed = needed
        self.available = available


__all__ = [
    "ErrorKind",
    "ErrorCode",
    "HuddleError",
    "fail",
    "CurrencyError",
    "InsufficientBalance",
]
