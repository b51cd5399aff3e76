"""
Protocol - Wiring of the Huddle components behind one entry point.

Every public operation returns (value, error) with error None on success.
"""

from typing import Optional, Tuple

from huddle.core.auction import AuctionEngine
from huddle.core.bids import BidLedger
from huddle.core.config import HuddleConfig
from huddle.core.errors import HuddleError
from huddle.core.identity import IdentityRegistry
from huddle.core.reputation import ReputationRegistry
from huddle.core.state import (
    Bid,
    Huddle,
    HuddleStore,
    IdentityBinding,
    ReputationEntry,
    ReputationScore,
)
from huddle.services.clock import Clock, SystemClock
from huddle.services.currency import CurrencyService, InMemoryCurrency
from huddle.services.events import EventLog, EventSink
from huddle.services.verifier import LinkProofVerifier, SocialProofVerifier


class HuddleProtocol:
    """
    Facade over identity, bids, auction and reputation.

    Collaborators default to the in-memory implementations.
    """

    def __init__(
        self,
        config: Optional[HuddleConfig] = None,
        currency: Optional[CurrencyService] = None,
        clock: Optional[Clock] = None,
        verifier: Optional[SocialProofVerifier] = None,
        events: Optional[EventSink] = None,
        store: Optional[HuddleStore] = None,
    ):
        self.config = config or HuddleConfig()
        self.currency = currency if currency is not None else InMemoryCurrency()
        self.clock = clock or SystemClock()
        self.verifier = verifier or LinkProofVerifier()
        self.events = events if events is not None else EventLog()
        self.store = store if store is not None else HuddleStore()

        self.identity = IdentityRegistry(
            self.store, self.verifier, self.events, self.config, self.clock
        )
        self.bids = BidLedger(
            self.store, self.currency, self.events, self.config, self.clock
        )
        self.auction = AuctionEngine(
            self.store, self.identity, self.bids, self.currency, self.events,
            self.config, self.clock,
        )
        self.reputation = ReputationRegistry(
            self.store, self.auction, self.events, self.config, self.clock
        )

    # =========================================================================
    # Operations
    # =========================================================================

    def bind(self, account_id: str, handle: str, proof_link: str) -> Tuple[Optional[IdentityBinding], Optional[HuddleError]]:
        return self.identity.bind(account_id, handle, proof_link)

    def create_huddle(self, host: str, scheduled_time: int, floor_price: int) -> Tuple[Optional[int], Optional[HuddleError]]:
        return self.auction.create_huddle(host, scheduled_time, floor_price)

    def open_huddle_for_host(self, caller: str, requested_host: str, floor_price: int) -> Tuple[Optional[int], Optional[HuddleError]]:
        return self.auction.open_huddle_for_host(caller, requested_host, floor_price)

    def accept_huddle(self, host: str, huddle_id: int, scheduled_time: int) -> Tuple[Optional[Huddle], Optional[HuddleError]]:
        return self.auction.accept_huddle(host, huddle_id, scheduled_time)

    def place_bid(self, bidder: str, huddle_id: int, value: int) -> Tuple[Optional[Bid], Optional[HuddleError]]:
        return self.bids.place_bid(bidder, huddle_id, value)

    def finalize(self, huddle_id: int) -> Tuple[Optional[Huddle], Optional[HuddleError]]:
        return self.auction.finalize(huddle_id)

    def claim(self, host: str, huddle_id: int) -> Tuple[Optional[int], Optional[HuddleError]]:
        return self.auction.claim(host, huddle_id)

    def rate(self, rater: str, huddle_id: int, ratee: str, stars: int) -> Tuple[Optional[ReputationEntry], Optional[HuddleError]]:
        return self.reputation.rate(rater, huddle_id, ratee, stars)

    # =========================================================================
    # Queries
    # =========================================================================

    def is_registered(self, account_id: str) -> bool:
        return self.identity.is_registered(account_id)

    def get_huddle(self, huddle_id: int) -> Optional[Huddle]:
        return self.auction.get_huddle(huddle_id)

    def get_score(self, account_id: str) -> ReputationScore:
        return self.reputation.get_score(account_id)

    def stats(self) -> dict:
        """Get protocol statistics."""
        return {
            "store": self.store.stats(),
            "identity": self.identity.stats(),
            "auction": self.auction.stats(),
            "bids": self.bids.stats(),
        }
