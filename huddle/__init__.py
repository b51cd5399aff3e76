"""
Huddle

An auction protocol in which registered hosts sell scheduled meeting
slots ("Huddles") to the highest bidder:
- Identity binding of hosts to social handles
- English auctions with reserved, strictly increasing bids
- Time-gated closing and one-time payout claims
- Post-auction reputation between host and winner
"""

__version__ = "0.1.0"
