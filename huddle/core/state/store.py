"""
Store - Keyed storage for protocol state.

Each entity kind lives in its own arena keyed by id (or account), with
secondary indexes for the lookups the components need. Components read
the store at every check and write to it only after all checks pass.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Set, Tuple

from huddle.core.state.models import (
    Bid,
    Huddle,
    IdentityBinding,
    ReputationEntry,
    ReputationScore,
)

RatingKey = Tuple[int, str, str]  # (huddle_id, rater_id, ratee_id)


class HuddleStore:
    """
    In-memory arenas for bindings, huddles, bids and ratings.

    Attributes:
        bindings: account_id -> IdentityBinding
        huddles: huddle_id -> Huddle
        bids: bid_id -> Bid
        ratings: (huddle_id, rater, ratee) -> ReputationEntry
        scores: account_id -> ReputationScore
    """

    def __init__(self):
        self.bindings: Dict[str, IdentityBinding] = {}
        self.huddles: Dict[int, Huddle] = {}
        self.bids: Dict[int, Bid] = {}
        self.ratings: Dict[RatingKey, ReputationEntry] = {}
        self.scores: Dict[str, ReputationScore] = {}

        # Secondary indexes
        self.huddles_by_host: Dict[str, List[int]] = defaultdict(list)
        self.bids_by_huddle: Dict[int, List[int]] = defaultdict(list)
        self.huddles_by_bidder: Dict[str, Set[int]] = defaultdict(set)

        self._huddle_counter = 0
        self._bid_counter = 0

    # =========================================================================
    # Id Allocation
    # =========================================================================

    def next_huddle_id(self) -> int:
        """Peek the id the next inserted Huddle will get."""
        return self._huddle_counter + 1

    def next_bid_id(self) -> int:
        return self._bid_counter + 1

    # =========================================================================
    # Inserts
    # =========================================================================

    def put_binding(self, binding: IdentityBinding) -> None:
        self.bindings[binding.account_id] = binding

    def insert_huddle(self, huddle: Huddle) -> None:
        if huddle.id != self.next_huddle_id():
            raise ValueError(f"Huddle id {huddle.id} out of sequence")
        self.huddles[huddle.id] = huddle
        self.huddles_by_host[huddle.host_id].append(huddle.id)
        self._huddle_counter = huddle.id

    def insert_bid(self, bid: Bid) -> None:
        if bid.id != self.next_bid_id():
            raise ValueError(f"Bid id {bid.id} out of sequence")
        self.bids[bid.id] = bid
        self.bids_by_huddle[bid.huddle_id].append(bid.id)
        self.huddles_by_bidder[bid.bidder_id].add(bid.huddle_id)
        self._bid_counter = bid.id

    def insert_rating(self, entry: ReputationEntry) -> ReputationScore:
        """Store a rating and fold it into the ratee's score."""
        self.ratings[(entry.huddle_id, entry.rater_id, entry.ratee_id)] = entry
        score = self.scores.get(entry.ratee_id)
        if score is None:
            score = ReputationScore(account_id=entry.ratee_id)
            self.scores[entry.ratee_id] = score
        score.total_stars += entry.stars
        score.rating_count += 1
        return score

    # =========================================================================
    # Lookups
    # =========================================================================

    def get_binding(self, account_id: str) -> Optional[IdentityBinding]:
        return self.bindings.get(account_id)

    def get_huddle(self, huddle_id: int) -> Optional[Huddle]:
        return self.huddles.get(huddle_id)

    def get_bid(self, bid_id: Optional[int]) -> Optional[Bid]:
        if bid_id is None:
            return None
        return self.bids.get(bid_id)

    def get_rating(self, huddle_id: int, rater_id: str, ratee_id: str) -> Optional[ReputationEntry]:
        return self.ratings.get((huddle_id, rater_id, ratee_id))

    def get_score(self, account_id: str) -> Optional[ReputationScore]:
        return self.scores.get(account_id)

    def host_huddle_ids(self, host_id: str) -> List[int]:
        return list(self.huddles_by_host.get(host_id, ()))

    def huddle_bid_ids(self, huddle_id: int) -> List[int]:
        return list(self.bids_by_huddle.get(huddle_id, ()))

    def bidder_huddle_ids(self, bidder_id: str) -> Set[int]:
        return set(self.huddles_by_bidder.get(bidder_id, ()))

    # =========================================================================
    # Statistics
    # =========================================================================

    def stats(self) -> dict:
        return {
            "bindings": len(self.bindings),
            "huddles": len(self.huddles),
            "bids": len(self.bids),
            "ratings": len(self.ratings),
        }
