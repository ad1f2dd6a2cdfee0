"""Observable holder of the current user session."""

import logging
from collections.abc import Callable
from typing import Literal

from newsdesk.services.identity import IdentityClient, IdentityError
from newsdesk.services.types import IdentityUser, SignInResult

logger = logging.getLogger(__name__)

SessionEvent = Literal["SIGNED_IN", "SIGNED_OUT"]
SessionListener = Callable[[SessionEvent, IdentityUser | None], None]


class UnauthenticatedError(Exception):
    """Raised when an operation needs a signed-in user and there is none."""


class SessionState:
    """Holds the access token of the caller and resolves it to a user on demand.

    Consumers that care about sign-in / sign-out subscribe here instead of
    talking to the identity service themselves.
    """

    def __init__(self, identity: IdentityClient, access_token: str | None = None) -> None:
        self._identity = identity
        self._access_token = access_token
        self._listeners: list[SessionListener] = []

    @property
    def access_token(self) -> str | None:
        return self._access_token

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register *listener*; the returned callable unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, event: SessionEvent, user: IdentityUser | None) -> None:
        for listener in list(self._listeners):
            listener(event, user)

    def current_user(self) -> IdentityUser | None:
        """Ask the identity service who owns the token. Every call is a fresh lookup."""
        if not self._access_token:
            return None
        try:
            return self._identity.get_user(self._access_token)
        except IdentityError:
            logger.exception("identity lookup failed; treating caller as signed out")
            return None

    def require_user(self) -> IdentityUser:
        user = self.current_user()
        if user is None:
            raise UnauthenticatedError("Not logged in")
        return user

    def sign_in(self, email: str, password: str) -> SignInResult:
        result = self._identity.sign_in(email, password)
        self._access_token = result["access_token"]
        self._notify("SIGNED_IN", result["user"])
        return result

    def sign_out(self) -> None:
        """Revoke the token remotely (best effort) and forget it locally."""
        token = self._access_token
        if token:
            try:
                self._identity.sign_out(token)
            except IdentityError as exc:
                logger.warning("remote sign-out failed: %s", exc)
        self._access_token = None
        self._notify("SIGNED_OUT", None)
