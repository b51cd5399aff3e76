"""
Identity Registry - Binds accounts to social handles.

This module provides:
- Host registration (account -> social handle + proof link)
- The capability check used to gate Huddle creation

A binding is created once and never updated or removed. The proof link
is checked for shape by a SocialProofVerifier; reading the post itself
happens off-chain.
"""

from typing import Optional, Tuple

from huddle.core.config import HuddleConfig
from huddle.core.errors import ErrorCode, HuddleError, fail
from huddle.core.state import HuddleStore, IdentityBinding
from huddle.services.clock import Clock, SystemClock
from huddle.services.events import BINDING_CREATED, EventSink, publish
from huddle.services.verifier import SocialProofVerifier
from huddle.utils.logger import get_logger
from huddle.utils.validation import validate_account, validate_string

logger = get_logger("identity")


class IdentityRegistry:
    """
    Registry of Hosts.

    Only accounts with a binding may create Huddles or have Huddles
    opened on their behalf.
    """

    def __init__(
        self,
        store: HuddleStore,
        verifier: SocialProofVerifier,
        events: EventSink,
        config: Optional[HuddleConfig] = None,
        clock: Optional[Clock] = None,
    ):
        self.store = store
        self.verifier = verifier
        self.events = events
        self.config = config or HuddleConfig()
        self.clock = clock or SystemClock()

    # =========================================================================
    # Registration
    # =========================================================================

    def bind(
        self,
        account_id: str,
        handle: str,
        proof_link: str,
    ) -> Tuple[Optional[IdentityBinding], Optional[HuddleError]]:
        """
        Bind an account to a social handle.

        Args:
            account_id: Signing account
            handle: Social handle (e.g. @arturgontijo)
            proof_link: Link to a post containing the account id

        Returns:
            (binding, error) - binding is None on failure
        """
        now = self.clock.now()

        valid, err = validate_account(account_id, "account_id")
        if not valid:
            return None, fail(ErrorCode.INVALID_INPUT, err)

        valid, err = validate_string(handle, "handle")
        if not valid:
            return None, fail(ErrorCode.INVALID_INPUT, err)
        if len(handle) > self.config.max_handle_length:
            return None, fail(
                ErrorCode.HANDLE_TOO_LONG,
                f"handle exceeds {self.config.max_handle_length} characters",
            )

        valid, err = validate_string(proof_link, "proof_link")
        if not valid:
            return None, fail(ErrorCode.INVALID_INPUT, err)
        if len(proof_link) > self.config.max_proof_length:
            return None, fail(
                ErrorCode.PROOF_TOO_LONG,
                f"proof exceeds {self.config.max_proof_length} characters",
            )

        if self.store.get_binding(account_id) is not None:
            logger.debug(f"Rejected bind for {account_id}: already registered")
            return None, fail(ErrorCode.ALREADY_REGISTERED, f"{account_id} already bound")

        try:
            proof_ok = self.verifier.validate(proof_link, account_id, handle)
        except Exception as exc:
            logger.warning(f"Verifier failed for {account_id}: {exc}")
            return None, fail(ErrorCode.VERIFIER_UNAVAILABLE, str(exc))

        if not proof_ok:
            logger.debug(f"Rejected bind for {account_id}: proof {proof_link!r} invalid")
            return None, fail(ErrorCode.INVALID_PROOF)

        binding = IdentityBinding(
            account_id=account_id,
            social_handle=handle,
            proof_link=proof_link,
            verified=True,
            bound_at=now,
        )
        self.store.put_binding(binding)

        publish(self.events, BINDING_CREATED, {
            "account_id": account_id,
            "handle": handle,
            "proof_link": proof_link,
        })
        logger.info(f"Bound {account_id} to {handle}")
        return binding, None

    # =========================================================================
    # Lookup
    # =========================================================================

    def is_registered(self, account_id: str) -> bool:
        """Check if account has a binding."""
        return self.store.get_binding(account_id) is not None

    def get_binding(self, account_id: str) -> Optional[IdentityBinding]:
        """Get an account's binding."""
        return self.store.get_binding(account_id)

    def stats(self) -> dict:
        return {"registered_hosts": len(self.store.bindings)}
