"""
Input Validation - Sanitization of operation arguments.

Each validator returns (is_valid, error_message) so callers can turn
failures into typed protocol errors.
"""

from typing import Any, Optional, Tuple

# =============================================================================
# Constants
# =============================================================================

MAX_ACCOUNT_ID_LENGTH = 128
MIN_AMOUNT = 0
MAX_AMOUNT = 2**128 - 1
MAX_TIMESTAMP = 2**64 - 1


# =============================================================================
# Validation Functions
# =============================================================================


def validate_integer(
    value: Any,
    name: str,
    min_val: int = MIN_AMOUNT,
    max_val: int = MAX_AMOUNT,
) -> Tuple[bool, str]:
    """
    Validate integer within bounds.

    Args:
        value: Value to validate
        name: Field name for errors
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        (is_valid, error_message)
    """
    # bool is an int subclass, but True is not an amount
    if not isinstance(value, int) or isinstance(value, bool):
        return False, f"{name} must be int, got {type(value).__name__}"

    if value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"

    if value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"

    return True, ""


def validate_amount(amount: Any, name: str = "amount", positive: bool = False) -> Tuple[bool, str]:
    """Validate a currency amount."""
    return validate_integer(amount, name, 1 if positive else MIN_AMOUNT, MAX_AMOUNT)


def validate_id(value: Any, name: str = "huddle_id") -> Tuple[bool, str]:
    """Validate an arena id (ids start at 1)."""
    return validate_integer(value, name, 1, MAX_TIMESTAMP)


def validate_timestamp(timestamp: Any, name: str = "scheduled_time") -> Tuple[bool, str]:
    """Validate a timestamp in seconds."""
    return validate_integer(timestamp, name, 0, MAX_TIMESTAMP)


def validate_string(
    value: Any,
    name: str,
    max_length: Optional[int] = None,
    allow_empty: bool = False,
) -> Tuple[bool, str]:
    """
    Validate string input.

    Args:
        value: Value to validate
        name: Field name for errors
        max_length: Maximum string length
        allow_empty: Whether "" is acceptable

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, f"{name} must be str, got {type(value).__name__}"

    if not allow_empty and not value.strip():
        return False, f"{name} must not be empty"

    if max_length is not None and len(value) > max_length:
        return False, f"{name} exceeds max length {max_length}"

    return True, ""


def validate_account(account: Any, name: str = "account") -> Tuple[bool, str]:
    """Validate an account identifier."""
    return validate_string(account, name, MAX_ACCOUNT_ID_LENGTH)


__all__ = [
    "validate_integer",
    "validate_amount",
    "validate_timestamp",
    "validate_string",
    "validate_account",
    "MAX_ACCOUNT_ID_LENGTH",
    "MAX_AMOUNT",
    "MAX_TIMESTAMP",
]
