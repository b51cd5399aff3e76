"""
Adversarial Tests - Invariants under hostile or interleaved input.

Tests verify:
1. Bids stay strictly increasing under random submission order
2. Funds are conserved and only the leader stays reserved
3. Failed operations leave no trace
4. Late and repeated operations are rejected
"""

import random

import pytest

from huddle.core.errors import ErrorCode
from huddle.core.protocol import HuddleProtocol
from huddle.services import EventLog, InMemoryCurrency, ManualClock

from tests.helpers import HOST, HOUR, T, proof_link

BIDDERS = [f"bidder{i}" for i in range(8)]


@pytest.fixture
def market():
    clock = ManualClock(T)
    currency = InMemoryCurrency([(b, 10_000) for b in BIDDERS])
    protocol = HuddleProtocol(currency=currency, clock=clock, events=EventLog())
    protocol.bind(HOST, "@host", proof_link("host"))
    return protocol, currency, clock


class TestBidFlood:
    @pytest.mark.parametrize("seed", [1, 7, 42])
    def test_accepted_bids_strictly_increase(self, market, seed):
        protocol, currency, clock = market
        rng = random.Random(seed)
        huddle_id, _ = protocol.create_huddle(HOST, T + HOUR, 100)

        for _ in range(300):
            clock.advance(rng.randint(0, 5))
            protocol.place_bid(rng.choice(BIDDERS), huddle_id, rng.randint(0, 3000))

        history = [b.value for b in protocol.bids.bids_for_huddle(huddle_id)]
        assert history, "expected at least one accepted bid"
        assert history[0] > 100
        assert all(later > earlier for earlier, later in zip(history, history[1:]))

    @pytest.mark.parametrize("seed", [3, 11])
    def test_only_leader_reserved(self, market, seed):
        protocol, currency, clock = market
        rng = random.Random(seed)
        huddle_id, _ = protocol.create_huddle(HOST, T + HOUR, 0)

        for _ in range(200):
            protocol.place_bid(rng.choice(BIDDERS), huddle_id, rng.randint(1, 12_000))

        leader = protocol.bids.winning_bid(huddle_id)
        for bidder in BIDDERS:
            expected = leader.value if bidder == leader.bidder_id else 0
            assert currency.reserved_balance(bidder) == expected
        assert currency.total_supply() == 10_000 * len(BIDDERS)

    def test_no_bid_after_scheduled_time(self, market):
        protocol, currency, clock = market
        huddle_id, _ = protocol.create_huddle(HOST, T + HOUR, 100)
        clock.set(T + HOUR)

        for offset, bidder in enumerate(BIDDERS):
            clock.advance(offset)
            _, err = protocol.place_bid(bidder, huddle_id, 1000 + offset)
            assert err.code == ErrorCode.EXPIRED

        assert protocol.bids.bids_for_huddle(huddle_id) == []


class TestNoPartialState:
    def test_failed_operations_leave_store_unchanged(self, market):
        protocol, currency, clock = market
        huddle_id, _ = protocol.create_huddle(HOST, T + HOUR, 100)
        protocol.place_bid(BIDDERS[0], huddle_id, 150)
        before = (protocol.store.stats(), len(protocol.events), currency.total_supply())

        failures = [
            protocol.bind(HOST, "@other", proof_link("other")),
            protocol.create_huddle("stranger", T + HOUR, 1),
            protocol.create_huddle(HOST, T, 1),
            protocol.place_bid(BIDDERS[1], huddle_id, 150),
            protocol.place_bid(BIDDERS[1], huddle_id, 50_000),
            protocol.place_bid(HOST, huddle_id, 500),
            protocol.finalize(huddle_id),
            protocol.claim(HOST, huddle_id),
            protocol.rate(HOST, huddle_id, BIDDERS[0], 5),
            protocol.accept_huddle(HOST, huddle_id, T + 2 * HOUR),
        ]

        assert all(value is None and err is not None for value, err in failures)
        assert (protocol.store.stats(), len(protocol.events), currency.total_supply()) == before
        assert currency.reserved_balance(BIDDERS[0]) == 150

    def test_claim_race(self, market):
        protocol, currency, clock = market
        huddle_id, _ = protocol.create_huddle(HOST, T + HOUR, 100)
        protocol.place_bid(BIDDERS[0], huddle_id, 500)
        clock.set(T + HOUR)
        protocol.finalize(huddle_id)

        results = [protocol.claim(HOST, huddle_id) for _ in range(5)]

        assert [value for value, _ in results].count(500) == 1
        assert currency.free_balance(HOST) == 500
