"""
Protocol entities.

Entities reference each other by id only. The store owns every instance.
"""

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Optional

# Sentinel scheduled_time for a guest-opened Huddle not yet accepted by its host
UNSCHEDULED = 0


class HuddleStatus(IntEnum):
    """Lifecycle of a Huddle."""
    GUEST_PENDING = 0   # Proposed by a guest, awaiting host acceptance
    OPEN = 1            # Accepting bids until scheduled_time
    CLOSED = 2          # Auction over, winner fixed
    CLAIMED = 3         # Host collected the winning bid


class BidStatus(IntEnum):
    """Derived status of a Bid."""
    WINNING = 0     # Highest bid of a biddable Huddle
    SURPASSED = 1   # Overtaken by a higher bid
    WINNER = 2      # Highest bid of a closed Huddle


@dataclass(frozen=True)
class IdentityBinding:
    """
    An account bound to a social handle.

    Attributes:
        account_id: Bound account
        social_handle: Claimed handle (e.g. @arturgontijo)
        proof_link: Post proving ownership of the handle
        verified: Whether the proof passed syntactic validation
        bound_at: Timestamp of the binding
    """
    account_id: str
    social_handle: str
    proof_link: str
    verified: bool = True
    bound_at: int = 0


@dataclass
class Huddle:
    """
    A meeting slot under auction.

    Attributes:
        id: Monotonic identifier, starting at 1
        host_id: Host receiving the winning bid
        scheduled_time: When the Huddle goes live (UNSCHEDULED for guest-opened)
        floor_price: The first bid must exceed this
        status: Lifecycle status
        current_winning_bid: Id of the highest accepted Bid
        opened_by: Account that created the Huddle
        created_at: Creation timestamp
    """
    id: int
    host_id: str
    scheduled_time: int
    floor_price: int
    status: HuddleStatus = HuddleStatus.OPEN
    current_winning_bid: Optional[int] = None
    opened_by: Optional[str] = None
    created_at: int = 0

    @property
    def is_scheduled(self) -> bool:
        return self.scheduled_time != UNSCHEDULED

    @property
    def is_biddable_status(self) -> bool:
        return self.status in (HuddleStatus.OPEN, HuddleStatus.GUEST_PENDING)

    @property
    def is_finished(self) -> bool:
        return self.status in (HuddleStatus.CLOSED, HuddleStatus.CLAIMED)

    def has_started(self, now: int) -> bool:
        """True once a scheduled Huddle's time is reached."""
        return self.is_scheduled and now >= self.scheduled_time

    def snapshot(self) -> "Huddle":
        """Detached copy for callers outside the engine."""
        return replace(self)


@dataclass(frozen=True)
class Bid:
    """An accepted bid. Immutable."""
    id: int
    huddle_id: int
    bidder_id: str
    value: int
    submitted_at: int


@dataclass(frozen=True)
class ReputationEntry:
    """One rating between the two participants of a Huddle."""
    huddle_id: int
    rater_id: str
    ratee_id: str
    stars: int
    rated_at: int = 0


@dataclass
class ReputationScore:
    """
    Running average of the ratings an account received.

    average is None while the account is unrated.
    """
    account_id: str
    total_stars: int = 0
    rating_count: int = 0

    @property
    def is_rated(self) -> bool:
        return self.rating_count > 0

    @property
    def average(self) -> Optional[float]:
        if not self.rating_count:
            return None
        return self.total_stars / self.rating_count
