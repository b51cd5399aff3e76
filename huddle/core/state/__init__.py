"""Protocol state: entities and keyed storage"""
from huddle.core.state.models import (
    UNSCHEDULED,
    HuddleStatus,
    BidStatus,
    IdentityBinding,
    Huddle,
    Bid,
    ReputationEntry,
    ReputationScore,
)
from huddle.core.state.store import HuddleStore

__all__ = [
    "UNSCHEDULED",
    "HuddleStatus",
    "BidStatus",
    "IdentityBinding",
    "Huddle",
    "Bid",
    "ReputationEntry",
    "ReputationScore",
    "HuddleStore",
]
