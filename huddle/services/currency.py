"""
Currency - Balance service consumed by the Huddle protocol.

The protocol never stores balances itself. It asks a CurrencyService to
reserve a bidder's funds, release surpassed bids and move the winning
bid's reserved value to the host. Every call may raise InsufficientBalance.
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Dict, Iterable, Tuple

from huddle.core.errors import InsufficientBalance
from huddle.utils.logger import get_logger

logger = get_logger("currency")


class CurrencyService(ABC):
    """Reservable balance interface."""

    @abstractmethod
    def reserve(self, account: str, value: int) -> None:
        """Move value from account's free balance into its reserve."""

    @abstractmethod
    def release(self, account: str, value: int) -> None:
        """Move value from account's reserve back to its free balance."""

    @abstractmethod
    def transfer(self, source: str, dest: str, value: int) -> None:
        """Move value out of source's reserve into dest's free balance."""


class InMemoryCurrency(CurrencyService):
    """
    Dictionary-backed balances.

    Attributes:
        free: account -> spendable balance
        reserved: account -> balance locked by bids
    """

    def __init__(self, balances: Iterable[Tuple[str, int]] = ()):
        self.free: Dict[str, int] = defaultdict(int)
        self.reserved: Dict[str, int] = defaultdict(int)
        for account, amount in balances:
            self.deposit(account, amount)

    def deposit(self, account: str, value: int) -> None:
        """Credit free balance (genesis / faucet)."""
        if value < 0:
            raise ValueError("Deposit must be non-negative")
        self.free[account] += value

    def free_balance(self, account: str) -> int:
        return self.free.get(account, 0)

    def reserved_balance(self, account: str) -> int:
        return self.reserved.get(account, 0)

    def reserve(self, account: str, value: int) -> None:
        available = self.free.get(account, 0)
        if available < value:
            raise InsufficientBalance(account, value, available)
        self.free[account] -= value
        self.reserved[account] += value
        logger.debug(f"Reserved {value} for {account}")

    def release(self, account: str, value: int) -> None:
        locked = self.reserved.get(account, 0)
        if locked < value:
            raise InsufficientBalance(account, value, locked)
        self.reserved[account] -= value
        self.free[account] += value
        logger.debug(f"Released {value} for {account}")

    def transfer(self, source: str, dest: str, value: int) -> None:
        locked = self.reserved.get(source, 0)
        if locked < value:
            raise InsufficientBalance(source, value, locked)
        self.reserved[source] -= value
        self.free[dest] += value
        logger.debug(f"Transferred {value} reserved from {source} to {dest}")

    def total_supply(self) -> int:
        return sum(self.free.values()) + sum(self.reserved.values())
