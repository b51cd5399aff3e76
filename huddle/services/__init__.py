"""External collaborators: currency, clock, social proof verifier, event sink."""
from huddle.services.currency import CurrencyService, InMemoryCurrency
from huddle.services.clock import Clock, SystemClock, ManualClock
from huddle.services.verifier import SocialProofVerifier, LinkProofVerifier
from huddle.services.events import EventSink, EventLog, Event, EVENT_NAMES, publish

__all__ = [
    "CurrencyService",
    "InMemoryCurrency",
    "Clock",
    "SystemClock",
    "ManualClock",
    "SocialProofVerifier",
    "LinkProofVerifier",
    "EventSink",
    "EventLog",
    "Event",
    "EVENT_NAMES",
    "publish",
]
