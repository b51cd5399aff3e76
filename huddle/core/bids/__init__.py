"""
Huddle Bid Module.

Accepts, validates and orders bids against Huddles.
"""

from huddle.core.bids.ledger import BidLedger

__all__ = ["BidLedger"]
