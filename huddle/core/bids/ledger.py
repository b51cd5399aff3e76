"""
Bid Ledger - English auction bookkeeping for Huddles.

Manages bidding on a single Huddle at a time:
- Bid validation against the freshest stored Huddle
- Strictly increasing ordering (ties never overtake)
- Fund reservation for the leader and release for the surpassed bid
- Bid history and derived bid status

The ledger writes only the Huddle's current_winning_bid link. Every
other Huddle field belongs to the AuctionEngine.
"""

from typing import List, Optional, Tuple

from huddle.core.config import HuddleConfig
from huddle.core.errors import CurrencyError, ErrorCode, HuddleError, fail
from huddle.core.state import Bid, BidStatus, Huddle, HuddleStatus, HuddleStore
from huddle.services.clock import Clock, SystemClock
from huddle.services.currency import CurrencyService
from huddle.services.events import BID_PLACED, EventSink, publish
from huddle.utils.logger import get_logger
from huddle.utils.validation import validate_account, validate_amount, validate_id

logger = get_logger("bids")


class BidLedger:
    """
    Accepts and orders bids for every Huddle.

    A bid must beat max(floor_price, current winning value) plus
    min_bid_increment. The first bid therefore has to exceed the floor.
    """

    def __init__(
        self,
        store: HuddleStore,
        currency: CurrencyService,
        events: EventSink,
        config: Optional[HuddleConfig] = None,
        clock: Optional[Clock] = None,
    ):
        self.store = store
        self.currency = currency
        self.events = events
        self.config = config or HuddleConfig()
        self.clock = clock or SystemClock()

    # =========================================================================
    # Bid Submission
    # =========================================================================

    def minimum_to_beat(self, huddle: Huddle) -> int:
        """Value a new bid must strictly exceed."""
        current = self.store.get_bid(huddle.current_winning_bid)
        threshold = huddle.floor_price if current is None else max(huddle.floor_price, current.value)
        return threshold + self.config.min_bid_increment

    def place_bid(
        self,
        bidder: str,
        huddle_id: int,
        value: int,
    ) -> Tuple[Optional[Bid], Optional[HuddleError]]:
        """
        Place a bid on a Huddle.

        Args:
            bidder: Bidding account
            huddle_id: Target Huddle
            value: Offered amount

        Returns:
            (bid, error) - bid is None on failure
        """
        now = self.clock.now()

        valid, err = validate_account(bidder, "bidder")
        if not valid:
            return None, fail(ErrorCode.INVALID_INPUT, err)
        valid, err = validate_amount(value, "value", positive=True)
        if not valid:
            return None, fail(ErrorCode.INVALID_INPUT, err)
        valid, err = validate_id(huddle_id)
        if not valid:
            return None, fail(ErrorCode.INVALID_INPUT, err)

        huddle = self.store.get_huddle(huddle_id)
        if huddle is None:
            return None, fail(ErrorCode.HUDDLE_NOT_FOUND, f"Huddle {huddle_id} not found")

        if not huddle.is_biddable_status:
            return None, fail(ErrorCode.NOT_OPEN, f"Huddle {huddle_id} is {huddle.status.name}")

        if huddle.has_started(now):
            return None, fail(
                ErrorCode.EXPIRED,
                f"Huddle {huddle_id} was scheduled for {huddle.scheduled_time}, now is {now}",
            )

        if bidder == huddle.host_id:
            return None, fail(ErrorCode.HOST_CANNOT_BID)

        threshold = self.minimum_to_beat(huddle)
        if value <= threshold:
            logger.debug(f"Bid {value} on huddle {huddle_id} rejected: must exceed {threshold}")
            return None, fail(ErrorCode.BID_TOO_LOW, f"Bid {value} must exceed {threshold}")

        bid_huddles = self.store.bidder_huddle_ids(bidder)
        if huddle_id not in bid_huddles and len(bid_huddles) >= self.config.max_bids_per_user:
            return None, fail(
                ErrorCode.TOO_MANY_BIDS,
                f"{bidder} already bid on {len(bid_huddles)} huddles",
            )

        previous = self.store.get_bid(huddle.current_winning_bid)
        error = self._move_funds(bidder, huddle_id, value, previous)
        if error is not None:
            return None, error

        bid = Bid(
            id=self.store.next_bid_id(),
            huddle_id=huddle_id,
            bidder_id=bidder,
            value=value,
            submitted_at=now,
        )
        self.store.insert_bid(bid)
        huddle.current_winning_bid = bid.id

        publish(self.events, BID_PLACED, {
            "huddle_id": huddle_id,
            "bid_id": bid.id,
            "bidder": bidder,
            "value": value,
            "previous_bidder": previous.bidder_id if previous else None,
        })
        logger.info(f"Bid {bid.id} on huddle {huddle_id}: {bidder} offers {value}")
        return bid, None

    def _move_funds(
        self,
        bidder: str,
        huddle_id: int,
        value: int,
        previous: Optional[Bid],
    ) -> Optional[HuddleError]:
        """
        Lock the new bid's value and free the surpassed one.

        A leader raising their own bid only locks the difference. Otherwise
        the new bid is reserved first, so a failed reserve leaves the
        current leader untouched.
        """
        if previous is not None and previous.bidder_id == bidder:
            try:
                self.currency.reserve(bidder, value - previous.value)
            except CurrencyError as exc:
                logger.warning(f"Raise failed for {bidder} on huddle {huddle_id}: {exc}")
                return fail(ErrorCode.INSUFFICIENT_FUNDS, str(exc))
            return None

        try:
            self.currency.reserve(bidder, value)
        except CurrencyError as exc:
            logger.warning(f"Reserve failed for {bidder} on huddle {huddle_id}: {exc}")
            return fail(ErrorCode.INSUFFICIENT_FUNDS, str(exc))

        if previous is None:
            return None

        try:
            self.currency.release(previous.bidder_id, previous.value)
        except CurrencyError as exc:
            logger.warning(f"Release failed for {previous.bidder_id} on huddle {huddle_id}: {exc}")
            try:
                self.currency.release(bidder, value)
            except CurrencyError as undo_exc:
                logger.error(
                    f"Could not undo reservation of {value} for {bidder} on huddle {huddle_id}: {undo_exc}"
                )
                return fail(ErrorCode.ROLLBACK_FAILED, str(undo_exc))
            return fail(ErrorCode.RELEASE_FAILED, str(exc))
        return None

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_bid(self, bid_id: int) -> Optional[Bid]:
        """Get bid by ID."""
        return self.store.get_bid(bid_id)

    def winning_bid(self, huddle_id: int) -> Optional[Bid]:
        """Current (or final) winning bid of a Huddle."""
        huddle = self.store.get_huddle(huddle_id)
        if huddle is None:
            return None
        return self.store.get_bid(huddle.current_winning_bid)

    def bids_for_huddle(self, huddle_id: int) -> List[Bid]:
        """Bid history of a Huddle, in acceptance order."""
        return [self.store.bids[bid_id] for bid_id in self.store.huddle_bid_ids(huddle_id)]

    def bids_for_bidder(self, bidder: str) -> List[Bid]:
        """All bids placed by an account."""
        return [bid for bid in self.store.bids.values() if bid.bidder_id == bidder]

    def bid_status(self, bid_id: int) -> Optional[BidStatus]:
        """Derive a bid's status from its Huddle's winner link."""
        bid = self.store.get_bid(bid_id)
        if bid is None:
            return None
        huddle = self.store.get_huddle(bid.huddle_id)
        if huddle.current_winning_bid != bid.id:
            return BidStatus.SURPASSED
        if huddle.status in (HuddleStatus.CLOSED, HuddleStatus.CLAIMED):
            return BidStatus.WINNER
        return BidStatus.WINNING

    def stats(self) -> dict:
        """Get ledger statistics."""
        leading = [
            self.store.get_bid(h.current_winning_bid)
            for h in self.store.huddles.values()
            if h.current_winning_bid is not None and h.is_biddable_status
        ]
        return {
            "total_bids": len(self.store.bids),
            "active_leading_bids": len(leading),
            "value_reserved_by_leaders": sum(b.value for b in leading),
        }
