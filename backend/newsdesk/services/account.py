"""Account deletion: removes the user's notes row, then the identity record."""

import logging

from newsdesk.services.identity import IdentityClient, IdentityError
from newsdesk.services.note_store import NoteRowStore, StorageError
from newsdesk.services.session import UnauthenticatedError

logger = logging.getLogger(__name__)

CONFIRMATION_PHRASE = "DELETE"


class ConfirmationError(ValueError):
    """Raised when the caller did not type the confirmation phrase exactly."""


class AccountService:
    def __init__(self, identity: IdentityClient, store: NoteRowStore) -> None:
        self._identity = identity
        self._store = store

    def delete_account(self, access_token: str | None, confirmation: str | None) -> None:
        """Delete the account owning *access_token*.

        Raises UnauthenticatedError for a missing or invalid token,
        ConfirmationError unless *confirmation* is exactly "DELETE",
        StorageError if the notes row cannot be removed and IdentityError if
        the identity record cannot be removed.
        """
        if not access_token:
            raise UnauthenticatedError("Missing access token")
        if confirmation != CONFIRMATION_PHRASE:
            raise ConfirmationError(
                "Deletion confirmation is required. Please type DELETE exactly and try again."
            )

        try:
            user = self._identity.get_user(access_token, admin=True)
        except IdentityError as exc:
            logger.warning("user lookup failed during account deletion: %s", exc)
            raise UnauthenticatedError("Invalid session token") from exc
        if user is None:
            raise UnauthenticatedError("Invalid session token")

        try:
            self._store.delete(user["id"])
        except StorageError as exc:
            if not exc.relation_missing:
                raise
            logger.warning("user_notes relation missing during account deletion: %s", exc)

        self._identity.delete_user(user["id"])
        logger.info("account %s deleted", user["id"])
