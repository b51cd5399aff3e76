"""
Event Sink - Outbound notifications for protocol state transitions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from huddle.utils.logger import get_logger

logger = get_logger("events")

BINDING_CREATED = "BindingCreated"
HUDDLE_CREATED = "HuddleCreated"
HUDDLE_ACCEPTED = "HuddleAccepted"
BID_PLACED = "BidPlaced"
HUDDLE_CLOSED = "HuddleClosed"
CLAIMED = "Claimed"
RATED = "Rated"

EVENT_NAMES = (
    BINDING_CREATED,
    HUDDLE_CREATED,
    HUDDLE_ACCEPTED,
    BID_PLACED,
    HUDDLE_CLOSED,
    CLAIMED,
    RATED,
)


class EventSink(ABC):
    """Event transport interface."""

    @abstractmethod
    def emit(self, name: str, payload: Dict[str, Any]) -> None:
        """Publish an event."""


@dataclass
class Event:
    """A recorded event."""
    name: str
    payload: Dict[str, Any] = field(default_factory=dict)
    sequence: int = 0


class EventLog(EventSink):
    """In-memory sink that keeps every event in emission order."""

    def __init__(self):
        self.events: List[Event] = []

    def emit(self, name: str, payload: Dict[str, Any]) -> None:
        event = Event(name=name, payload=dict(payload), sequence=len(self.events) + 1)
        self.events.append(event)
        logger.debug(f"#{event.sequence} {name} {payload}")

    def named(self, name: str) -> List[Event]:
        """All events with the given name."""
        return [e for e in self.events if e.name == name]

    def last(self, name: Optional[str] = None) -> Optional[Event]:
        """Most recent event, optionally filtered by name."""
        events = self.named(name) if name else self.events
        return events[-1] if events else None

    def __len__(self) -> int:
        return len(self.events)


def publish(sink: EventSink, name: str, payload: Dict[str, Any]) -> None:
    """
    Emit an event after a committed transition.

    Sink failures are logged and dropped; the state change they report
    has already happened.
    """
    try:
        sink.emit(name, payload)
    except Exception:
        logger.exception(f"Event sink failed to emit {name}")
