"""
Social Proof Verifier - Syntactic check of identity proof links.

Hosts bind their account to a social handle by publishing a post that
mentions the account, e.g.

    https://twitter.com/arturgontijo/status/1509563457811017729

Only the shape of the link is checked here. Whether the post really
contains the account id is an off-chain concern.
"""

import re
from abc import ABC, abstractmethod
from typing import Tuple
from urllib.parse import urlparse

from huddle.utils.logger import get_logger

logger = get_logger("verifier")

DEFAULT_PROOF_HOSTS: Tuple[str, ...] = (
    "twitter.com",
    "www.twitter.com",
    "mobile.twitter.com",
    "x.com",
    "www.x.com",
)

STATUS_PATH = re.compile(r"^/(?P<handle>[A-Za-z0-9_]{1,15})/status/(?P<post>\d+)/?$")


class SocialProofVerifier(ABC):
    """Proof reference validation interface."""

    @abstractmethod
    def validate(self, proof_link: str, account_id: str, handle: str) -> bool:
        """Return True if proof_link is a well-formed proof for handle."""


class LinkProofVerifier(SocialProofVerifier):
    """Accepts https status links whose author matches the claimed handle."""

    def __init__(self, allowed_hosts: Tuple[str, ...] = DEFAULT_PROOF_HOSTS):
        self.allowed_hosts = tuple(h.lower() for h in allowed_hosts)

    def validate(self, proof_link: str, account_id: str, handle: str) -> bool:
        parsed = urlparse(proof_link)
        if parsed.scheme != "https" or parsed.netloc.lower() not in self.allowed_hosts:
            logger.debug(f"Proof for {account_id} rejected: unsupported location {parsed.netloc!r}")
            return False

        match = STATUS_PATH.match(parsed.path)
        if not match:
            logger.debug(f"Proof for {account_id} rejected: not a status link")
            return False

        # Handles are case-insensitive on both platforms
        if match.group("handle").lower() != handle.lstrip("@").lower():
            logger.debug(f"Proof for {account_id} rejected: author is not {handle}")
            return False

        return True
