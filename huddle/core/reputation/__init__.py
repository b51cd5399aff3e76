"""Post-auction reputation system"""
from huddle.core.reputation.registry import ReputationRegistry

__all__ = ["ReputationRegistry"]
