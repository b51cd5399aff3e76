"""
Reputation Registry - Star ratings between Huddle participants.

Once a Huddle is closed, its host and winning bidder may rate each
other once. Every account's score is the plain average of the stars it
received, across all Huddles, and is readable by anyone.
"""

from typing import List, Optional, Tuple

from huddle.core.auction import AuctionEngine
from huddle.core.config import HuddleConfig
from huddle.core.errors import ErrorCode, HuddleError, fail
from huddle.core.state import HuddleStore, ReputationEntry, ReputationScore
from huddle.services.clock import Clock, SystemClock
from huddle.services.events import RATED, EventSink, publish
from huddle.utils.logger import get_logger
from huddle.utils.validation import validate_id, validate_integer

logger = get_logger("reputation")


class ReputationRegistry:
    """Records ratings and maintains running averages."""

    def __init__(
        self,
        store: HuddleStore,
        auction: AuctionEngine,
        events: EventSink,
        config: Optional[HuddleConfig] = None,
        clock: Optional[Clock] = None,
    ):
        self.store = store
        self.auction = auction
        self.events = events
        self.config = config or HuddleConfig()
        self.clock = clock or SystemClock()

    def rate(
        self,
        rater: str,
        huddle_id: int,
        ratee: str,
        stars: int,
    ) -> Tuple[Optional[ReputationEntry], Optional[HuddleError]]:
        """
        Rate the other participant of a closed Huddle.

        Args:
            rater: Host or winning bidder
            huddle_id: Closed or claimed Huddle
            ratee: The other participant
            stars: Between min_stars and max_stars

        Returns:
            (entry, error)
        """
        now = self.clock.now()

        valid, err = validate_integer(stars, "stars", self.config.min_stars, self.config.max_stars)
        if not valid:
            return None, fail(ErrorCode.INVALID_STARS, err)
        valid, err = validate_id(huddle_id)
        if not valid:
            return None, fail(ErrorCode.INVALID_INPUT, err)

        huddle = self.auction.get_huddle(huddle_id)
        if huddle is None:
            return None, fail(ErrorCode.HUDDLE_NOT_FOUND, f"Huddle {huddle_id} not found")
        if not huddle.is_finished:
            return None, fail(ErrorCode.HUDDLE_NOT_CLOSED, f"Huddle {huddle_id} is {huddle.status.name}")

        winner = self.auction.winner_of(huddle_id)
        if winner is None or {rater, ratee} != {huddle.host_id, winner}:
            logger.debug(f"Rating on huddle {huddle_id} rejected: {rater} -> {ratee} not participants")
            return None, fail(ErrorCode.NOT_PARTICIPANT)

        if self.store.get_rating(huddle_id, rater, ratee) is not None:
            return None, fail(ErrorCode.ALREADY_RATED, f"{rater} already rated {ratee} for huddle {huddle_id}")

        entry = ReputationEntry(
            huddle_id=huddle_id,
            rater_id=rater,
            ratee_id=ratee,
            stars=stars,
            rated_at=now,
        )
        score = self.store.insert_rating(entry)

        publish(self.events, RATED, {
            "huddle_id": huddle_id,
            "rater": rater,
            "ratee": ratee,
            "stars": stars,
        })
        logger.info(f"{rater} rated {ratee} {stars} stars (avg {score.average:.2f} over {score.rating_count})")
        return entry, None

    def get_score(self, account_id: str) -> ReputationScore:
        """
        Average stars received by an account.

        Unrated accounts get a score with rating_count 0 and average None.
        """
        score = self.store.get_score(account_id)
        if score is None:
            return ReputationScore(account_id=account_id)
        return ReputationScore(
            account_id=account_id,
            total_stars=score.total_stars,
            rating_count=score.rating_count,
        )

    def ratings_for(self, account_id: str) -> List[ReputationEntry]:
        """Ratings received by an account."""
        return [e for e in self.store.ratings.values() if e.ratee_id == account_id]
