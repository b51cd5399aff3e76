"""Shared fixtures for Huddle tests."""

import pytest

from huddle.core.config import HuddleConfig
from huddle.core.protocol import HuddleProtocol
from huddle.services import EventLog, InMemoryCurrency, ManualClock

from tests.helpers import ALICE, BOB, CAROL, HOST, HOUR, T, proof_link


@pytest.fixture
def clock():
    return ManualClock(T)


@pytest.fixture
def currency():
    return InMemoryCurrency([(HOST, 0), (ALICE, 1000), (BOB, 1000), (CAROL, 1000)])


@pytest.fixture
def events():
    return EventLog()


@pytest.fixture
def config():
    return HuddleConfig()


@pytest.fixture
def protocol(config, currency, clock, events):
    return HuddleProtocol(config=config, currency=currency, clock=clock, events=events)


@pytest.fixture
def registered(protocol):
    """Protocol with HOST bound to @host."""
    binding, err = protocol.bind(HOST, "@host", proof_link("host"))
    assert err is None
    return protocol


@pytest.fixture
def open_huddle(registered):
    """An OPEN Huddle: floor 100, live in one hour."""
    huddle_id, err = registered.create_huddle(HOST, T + HOUR, 100)
    assert err is None
    return huddle_id
