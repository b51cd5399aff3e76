"""
End-to-end Huddle scenarios.

Each test drives the protocol facade through a full lifecycle:
1. Auction with outbidding, finalization and a single claim
2. Guest-opened Huddle accepted after receiving a bid
3. Mutual ratings after the auction closes
"""

import pytest

from huddle.core.errors import ErrorCode
from huddle.core.state import HuddleStatus

from tests.helpers import ALICE, BOB, CAROL, HOST, HOUR, T, proof_link


class TestAuctionScenario:
    def test_full_auction(self, protocol, currency, clock, events):
        # Host binds identity and creates a Huddle
        assert not protocol.is_registered(HOST)
        _, err = protocol.create_huddle(HOST, T + HOUR, 100)
        assert err.code == ErrorCode.NOT_REGISTERED

        _, err = protocol.bind(HOST, "@host", proof_link("host"))
        assert err is None
        assert protocol.is_registered(HOST)

        huddle_id, err = protocol.create_huddle(HOST, T + HOUR, 100)
        assert err is None

        # Bidding
        _, err = protocol.place_bid(ALICE, huddle_id, 150)
        assert err is None
        assert currency.reserved_balance(ALICE) == 150

        _, err = protocol.place_bid(BOB, huddle_id, 120)
        assert err.code == ErrorCode.BID_TOO_LOW

        _, err = protocol.place_bid(BOB, huddle_id, 200)
        assert err is None
        assert currency.reserved_balance(ALICE) == 0
        assert currency.free_balance(ALICE) == 1000

        # Time passes, anyone closes the auction
        clock.set(T + HOUR)
        _, err = protocol.place_bid(CAROL, huddle_id, 500)
        assert err.code == ErrorCode.EXPIRED

        huddle, err = protocol.finalize(huddle_id)
        assert err is None
        assert huddle.status == HuddleStatus.CLOSED
        winner = protocol.bids.winning_bid(huddle_id)
        assert (winner.bidder_id, winner.value) == (BOB, 200)

        # Host claims exactly once
        value, err = protocol.claim(HOST, huddle_id)
        assert err is None
        assert value == 200
        assert currency.free_balance(HOST) == 200
        assert protocol.get_huddle(huddle_id).status == HuddleStatus.CLAIMED

        _, err = protocol.claim(HOST, huddle_id)
        assert err.code == ErrorCode.ALREADY_CLAIMED

        assert [e.name for e in events.events] == [
            "BindingCreated",
            "HuddleCreated",
            "BidPlaced",
            "BidPlaced",
            "HuddleClosed",
            "Claimed",
        ]
        assert currency.total_supply() == 3000


class TestGuestScenario:
    def test_guest_opened_huddle(self, registered, clock):
        huddle_id, err = registered.open_huddle_for_host(ALICE, HOST, 40)
        assert err is None
        huddle = registered.get_huddle(huddle_id)
        assert huddle.status == HuddleStatus.GUEST_PENDING
        assert huddle.scheduled_time == 0

        bid, err = registered.place_bid(CAROL, huddle_id, 50)
        assert err is None

        huddle, err = registered.accept_huddle(HOST, huddle_id, T + 2 * HOUR)
        assert err is None
        assert huddle.status == HuddleStatus.OPEN
        assert registered.bids.winning_bid(huddle_id) == bid

        # Once scheduled, the Huddle behaves like any other
        _, err = registered.place_bid(BOB, huddle_id, 50)
        assert err.code == ErrorCode.BID_TOO_LOW

        clock.set(T + 2 * HOUR)
        registered.finalize(huddle_id)
        value, err = registered.claim(HOST, huddle_id)
        assert (value, err) == (50, None)


class TestReputationScenario:
    def test_mutual_ratings(self, registered, clock):
        huddle_id, _ = registered.create_huddle(HOST, T + HOUR, 100)
        registered.place_bid(BOB, huddle_id, 200)

        _, err = registered.rate(HOST, huddle_id, BOB, 5)
        assert err.code == ErrorCode.HUDDLE_NOT_CLOSED

        clock.set(T + HOUR)
        registered.finalize(huddle_id)

        _, err = registered.rate(HOST, huddle_id, BOB, 5)
        assert err is None
        _, err = registered.rate(BOB, huddle_id, HOST, 4)
        assert err is None
        _, err = registered.rate(HOST, huddle_id, BOB, 5)
        assert err.code == ErrorCode.ALREADY_RATED
        _, err = registered.rate(CAROL, huddle_id, HOST, 1)
        assert err.code == ErrorCode.NOT_PARTICIPANT
        _, err = registered.rate(CAROL, huddle_id, BOB, 1)
        assert err.code == ErrorCode.NOT_PARTICIPANT

        assert registered.get_score(BOB).average == pytest.approx(5)
        assert registered.get_score(HOST).average == pytest.approx(4)
        assert not registered.get_score(CAROL).is_rated
