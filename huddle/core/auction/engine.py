"""
Auction Engine - Huddle lifecycle for the Huddle protocol.

Lifecycle:

    create_huddle ───────────────────────────► OPEN
    open_huddle_for_host ─► GUEST_PENDING ──accept_huddle──┘
                                                │
                              finalize (now >= scheduled_time)
                                                ▼
                                             CLOSED ──claim──► CLAIMED

GUEST_PENDING Huddles carry scheduled_time = UNSCHEDULED and accept
bids, which survive acceptance. finalize is permissionless and
idempotent. claim pays the host exactly once.
"""

from typing import List, Optional, Tuple

from huddle.core.bids import BidLedger
from huddle.core.config import HuddleConfig
from huddle.core.errors import CurrencyError, ErrorCode, HuddleError, fail
from huddle.core.identity import IdentityRegistry
from huddle.core.state import UNSCHEDULED, Bid, Huddle, HuddleStatus, HuddleStore
from huddle.services.clock import Clock, SystemClock
from huddle.services.currency import CurrencyService
from huddle.services.events import (
    CLAIMED,
    HUDDLE_ACCEPTED,
    HUDDLE_CLOSED,
    HUDDLE_CREATED,
    EventSink,
    publish,
)
from huddle.utils.logger import get_logger
from huddle.utils.validation import validate_account, validate_amount, validate_id, validate_timestamp

logger = get_logger("auction")


class AuctionEngine:
    """
    Owns every Huddle and its status transitions.

    Host eligibility comes from the IdentityRegistry; winner state comes
    from the BidLedger.
    """

    def __init__(
        self,
        store: HuddleStore,
        identity: IdentityRegistry,
        bids: BidLedger,
        currency: CurrencyService,
        events: EventSink,
        config: Optional[HuddleConfig] = None,
        clock: Optional[Clock] = None,
    ):
        self.store = store
        self.identity = identity
        self.bids = bids
        self.currency = currency
        self.events = events
        self.config = config or HuddleConfig()
        self.clock = clock or SystemClock()

    # =========================================================================
    # Creation
    # =========================================================================

    def _check_schedule(self, scheduled_time: int, now: int) -> Optional[HuddleError]:
        valid, err = validate_timestamp(scheduled_time)
        if not valid:
            return fail(ErrorCode.INVALID_INPUT, err)
        earliest = now + self.config.min_schedule_lead
        if scheduled_time <= now or scheduled_time < earliest:
            return fail(
                ErrorCode.INVALID_TIME,
                f"scheduled_time {scheduled_time} must be after {now}"
                + (f" and at least {earliest}" if self.config.min_schedule_lead else ""),
            )
        return None

    def _check_new_huddle(self, host: str, floor_price: int) -> Optional[HuddleError]:
        valid, err = validate_account(host, "host")
        if not valid:
            return fail(ErrorCode.INVALID_INPUT, err)
        valid, err = validate_amount(floor_price, "floor_price")
        if not valid:
            return fail(ErrorCode.INVALID_INPUT, err)
        if not self.identity.is_registered(host):
            return fail(ErrorCode.NOT_REGISTERED, f"{host} has no identity binding")
        hosted = len(self.store.host_huddle_ids(host))
        if hosted >= self.config.max_huddles_per_host:
            return fail(ErrorCode.TOO_MANY_HUDDLES, f"{host} already hosts {hosted} huddles")
        return None

    def _insert(
        self,
        host: str,
        scheduled_time: int,
        floor_price: int,
        status: HuddleStatus,
        opened_by: str,
        now: int,
    ) -> Huddle:
        huddle = Huddle(
            id=self.store.next_huddle_id(),
            host_id=host,
            scheduled_time=scheduled_time,
            floor_price=floor_price,
            status=status,
            opened_by=opened_by,
            created_at=now,
        )
        self.store.insert_huddle(huddle)
        publish(self.events, HUDDLE_CREATED, {
            "huddle_id": huddle.id,
            "host": host,
            "scheduled_time": scheduled_time,
            "floor_price": floor_price,
            "opened_by": opened_by,
        })
        return huddle

    def create_huddle(
        self,
        host: str,
        scheduled_time: int,
        floor_price: int,
    ) -> Tuple[Optional[int], Optional[HuddleError]]:
        """
        Create an OPEN Huddle.

        Args:
            host: Registered host account
            scheduled_time: When the Huddle goes live (strictly future)
            floor_price: First bid must exceed this

        Returns:
            (huddle_id, error) - huddle_id is None on failure
        """
        now = self.clock.now()

        error = self._check_new_huddle(host, floor_price)
        if error is None:
            error = self._check_schedule(scheduled_time, now)
        if error is not None:
            logger.debug(f"create_huddle rejected for {host}: {error}")
            return None, error

        huddle = self._insert(host, scheduled_time, floor_price, HuddleStatus.OPEN, host, now)
        logger.info(f"Huddle {huddle.id} created by {host} at {scheduled_time}, floor={floor_price}")
        return huddle.id, None

    def open_huddle_for_host(
        self,
        caller: str,
        requested_host: str,
        floor_price: int,
    ) -> Tuple[Optional[int], Optional[HuddleError]]:
        """
        Propose a Huddle on behalf of a host.

        The Huddle starts GUEST_PENDING and unscheduled; it can take bids
        before the host accepts it.

        Args:
            caller: Proposing account (anyone)
            requested_host: Host the Huddle is for
            floor_price: First bid must exceed this

        Returns:
            (huddle_id, error)
        """
        now = self.clock.now()

        valid, err = validate_account(caller, "caller")
        if not valid:
            return None, fail(ErrorCode.INVALID_INPUT, err)
        error = self._check_new_huddle(requested_host, floor_price)
        if error is not None:
            logger.debug(f"open_huddle_for_host rejected for {requested_host}: {error}")
            return None, error

        huddle = self._insert(
            requested_host, UNSCHEDULED, floor_price, HuddleStatus.GUEST_PENDING, caller, now
        )
        logger.info(f"Huddle {huddle.id} proposed by {caller} for {requested_host}, floor={floor_price}")
        return huddle.id, None

    # =========================================================================
    # Transitions
    # =========================================================================

    def _lookup(self, huddle_id: int) -> Tuple[Optional[Huddle], Optional[HuddleError]]:
        valid, err = validate_id(huddle_id)
        if not valid:
            return None, fail(ErrorCode.INVALID_INPUT, err)
        huddle = self.store.get_huddle(huddle_id)
        if huddle is None:
            return None, fail(ErrorCode.HUDDLE_NOT_FOUND, f"Huddle {huddle_id} not found")
        return huddle, None

    def accept_huddle(
        self,
        host: str,
        huddle_id: int,
        scheduled_time: int,
    ) -> Tuple[Optional[Huddle], Optional[HuddleError]]:
        """
        Accept a guest-opened Huddle and schedule it (GUEST_PENDING -> OPEN).

        Returns:
            (huddle, error)
        """
        now = self.clock.now()

        huddle, error = self._lookup(huddle_id)
        if error is not None:
            return None, error
        if host != huddle.host_id:
            return None, fail(ErrorCode.UNAUTHORIZED, f"Huddle {huddle_id} was requested for another host")
        if huddle.status != HuddleStatus.GUEST_PENDING:
            return None, fail(ErrorCode.NOT_PENDING, f"Huddle {huddle_id} is {huddle.status.name}")
        error = self._check_schedule(scheduled_time, now)
        if error is not None:
            return None, error

        huddle.scheduled_time = scheduled_time
        huddle.status = HuddleStatus.OPEN

        publish(self.events, HUDDLE_ACCEPTED, {
            "huddle_id": huddle_id,
            "host": host,
            "scheduled_time": scheduled_time,
            "winning_bid": huddle.current_winning_bid,
        })
        logger.info(f"Huddle {huddle_id} accepted by {host} for {scheduled_time}")
        return huddle.snapshot(), None

    def finalize(self, huddle_id: int) -> Tuple[Optional[Huddle], Optional[HuddleError]]:
        """
        Close a Huddle whose scheduled time has been reached.

        Anyone may call it. Repeated calls on a finished Huddle return it
        unchanged.

        Returns:
            (huddle, error)
        """
        now = self.clock.now()

        huddle, error = self._lookup(huddle_id)
        if error is not None:
            return None, error
        if huddle.is_finished:
            return huddle.snapshot(), None
        if huddle.status != HuddleStatus.OPEN:
            return None, fail(ErrorCode.NOT_OPEN, f"Huddle {huddle_id} is {huddle.status.name}")
        if not huddle.has_started(now):
            return None, fail(
                ErrorCode.TIME_NOT_REACHED,
                f"Huddle {huddle_id} closes at {huddle.scheduled_time}, now is {now}",
            )

        huddle.status = HuddleStatus.CLOSED
        winner = self.store.get_bid(huddle.current_winning_bid)

        publish(self.events, HUDDLE_CLOSED, {
            "huddle_id": huddle_id,
            "winner": winner.bidder_id if winner else None,
            "value": winner.value if winner else 0,
        })
        if winner:
            logger.info(f"Huddle {huddle_id} closed: winner={winner.bidder_id}, value={winner.value}")
        else:
            logger.info(f"Huddle {huddle_id} closed without bids")
        return huddle.snapshot(), None

    def claim(self, host: str, huddle_id: int) -> Tuple[Optional[int], Optional[HuddleError]]:
        """
        Pay the winning bid to the host.

        Args:
            host: Calling account, must be the Huddle host
            huddle_id: Closed Huddle

        Returns:
            (claimed_value, error)
        """
        huddle, error = self._lookup(huddle_id)
        if error is not None:
            return None, error
        if host != huddle.host_id:
            return None, fail(ErrorCode.NOT_HOST, f"{host} does not host huddle {huddle_id}")
        if huddle.status == HuddleStatus.CLAIMED:
            return None, fail(ErrorCode.ALREADY_CLAIMED, f"Huddle {huddle_id} already claimed")
        if huddle.status != HuddleStatus.CLOSED:
            return None, fail(ErrorCode.NOT_CLOSED, f"Huddle {huddle_id} is {huddle.status.name}")

        winner = self.store.get_bid(huddle.current_winning_bid)
        if winner is None:
            return None, fail(ErrorCode.NO_WINNER, f"Huddle {huddle_id} closed without bids")

        try:
            self.currency.transfer(winner.bidder_id, host, winner.value)
        except CurrencyError as exc:
            logger.warning(f"Claim transfer failed for huddle {huddle_id}: {exc}")
            return None, fail(ErrorCode.TRANSFER_FAILED, str(exc))

        huddle.status = HuddleStatus.CLAIMED

        publish(self.events, CLAIMED, {
            "huddle_id": huddle_id,
            "host": host,
            "winner": winner.bidder_id,
            "value": winner.value,
        })
        logger.info(f"Huddle {huddle_id} claimed by {host}: {winner.value}")
        return winner.value, None

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_huddle(self, huddle_id: int) -> Optional[Huddle]:
        """Get a copy of a Huddle by ID."""
        huddle, _ = self._lookup(huddle_id)
        return huddle.snapshot() if huddle else None

    def huddles_for_host(self, host: str) -> List[Huddle]:
        """Huddles hosted by an account, oldest first."""
        return [self.store.huddles[hid].snapshot() for hid in self.store.host_huddle_ids(host)]

    def winning_bid(self, huddle_id: int) -> Optional[Bid]:
        return self.bids.winning_bid(huddle_id)

    def winner_of(self, huddle_id: int) -> Optional[str]:
        """Winning bidder of a finished Huddle."""
        huddle = self.store.get_huddle(huddle_id)
        if huddle is None or not huddle.is_finished:
            return None
        bid = self.store.get_bid(huddle.current_winning_bid)
        return bid.bidder_id if bid else None

    def stats(self) -> dict:
        """Get auction statistics."""
        by_status = {status.name.lower(): 0 for status in HuddleStatus}
        for huddle in self.store.huddles.values():
            by_status[huddle.status.name.lower()] += 1
        return {"total_huddles": len(self.store.huddles), **by_status}
