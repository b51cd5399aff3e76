"""
Tests for the in-memory collaborators.
"""

import logging

import pytest

from huddle.core.errors import InsufficientBalance
from huddle.services import EventLog, EventSink, InMemoryCurrency, LinkProofVerifier, ManualClock, publish


class TestInMemoryCurrency:
    def test_reserve_and_release(self):
        currency = InMemoryCurrency([("alice", 100)])

        currency.reserve("alice", 60)
        assert currency.free_balance("alice") == 40
        assert currency.reserved_balance("alice") == 60

        currency.release("alice", 60)
        assert currency.free_balance("alice") == 100
        assert currency.reserved_balance("alice") == 0

    def test_reserve_more_than_free_fails(self):
        currency = InMemoryCurrency([("alice", 10)])

        with pytest.raises(InsufficientBalance):
            currency.reserve("alice", 11)
        assert currency.free_balance("alice") == 10

    def test_release_more_than_reserved_fails(self):
        currency = InMemoryCurrency([("alice", 10)])

        with pytest.raises(InsufficientBalance):
            currency.release("alice", 1)

    def test_transfer_moves_reserved_to_free(self):
        currency = InMemoryCurrency([("alice", 100)])
        currency.reserve("alice", 70)

        currency.transfer("alice", "host", 70)

        assert currency.reserved_balance("alice") == 0
        assert currency.free_balance("alice") == 30
        assert currency.free_balance("host") == 70
        assert currency.total_supply() == 100

    def test_transfer_requires_reservation(self):
        currency = InMemoryCurrency([("alice", 100)])

        with pytest.raises(InsufficientBalance):
            currency.transfer("alice", "host", 1)

    def test_negative_deposit_rejected(self):
        with pytest.raises(ValueError):
            InMemoryCurrency([("alice", -1)])


class TestManualClock:
    def test_set_and_advance(self):
        clock = ManualClock(100)

        assert clock.now() == 100
        assert clock.advance(50) == 150
        clock.set(10)
        assert clock.now() == 10


class TestLinkProofVerifier:
    @pytest.mark.parametrize("link", [
        "https://twitter.com/arturgontijo/status/1509563457811017729",
        "https://x.com/ArturGontijo/status/42",
        "https://mobile.twitter.com/arturgontijo/status/42/",
    ])
    def test_accepts_status_links(self, link):
        assert LinkProofVerifier().validate(link, "acct", "@arturgontijo")

    @pytest.mark.parametrize("link", [
        "http://twitter.com/arturgontijo/status/42",
        "https://example.com/arturgontijo/status/42",
        "https://twitter.com/arturgontijo",
        "https://twitter.com/arturgontijo/status/abc",
        "https://twitter.com/someoneelse/status/42",
        "alice's proof",
    ])
    def test_rejects_malformed_links(self, link):
        assert not LinkProofVerifier().validate(link, "acct", "@arturgontijo")

    def test_custom_hosts(self):
        verifier = LinkProofVerifier(allowed_hosts=("social.example",))

        assert verifier.validate("https://social.example/bob/status/1", "acct", "bob")
        assert not verifier.validate("https://twitter.com/bob/status/1", "acct", "bob")


class TestEventLog:
    def test_records_in_order(self):
        log = EventLog()

        log.emit("A", {"x": 1})
        log.emit("B", {})
        log.emit("A", {"x": 2})

        assert len(log) == 3
        assert [e.sequence for e in log.events] == [1, 2, 3]
        assert [e.payload["x"] for e in log.named("A")] == [1, 2]
        assert log.last().name == "A"
        assert log.last("B").sequence == 2
        assert log.last("C") is None

    def test_payload_is_copied(self):
        log = EventLog()
        payload = {"x": 1}

        log.emit("A", payload)
        payload["x"] = 99

        assert log.events[0].payload == {"x": 1}


class TestPublish:
    def test_delivers_to_sink(self):
        log = EventLog()

        publish(log, "Claimed", {"huddle_id": 1})

        assert log.last("Claimed").payload == {"huddle_id": 1}

    def test_sink_failure_is_logged_not_raised(self, caplog):
        class Unreachable(EventSink):
            def emit(self, name, payload):
                raise ConnectionError("no route to host")

        with caplog.at_level(logging.ERROR, logger="huddle.events"):
            publish(Unreachable(), "BidPlaced", {"bid_id": 3})

        assert "Event sink failed to emit BidPlaced" in caplog.text
