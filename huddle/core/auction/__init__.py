"""
Huddle Auction Module.

Creates Huddles, moves them through their lifecycle and pays hosts.
"""

from huddle.core.auction.engine import AuctionEngine

__all__ = ["AuctionEngine"]
