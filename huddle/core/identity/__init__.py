"""
Huddle Identity Module.

Binds accounts to social handles and gates who may host Huddles.
"""

from huddle.core.identity.registry import IdentityRegistry

__all__ = ["IdentityRegistry"]
