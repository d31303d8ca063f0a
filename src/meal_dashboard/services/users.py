"""Current-user lookup."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID


class NotSignedInError(PermissionError):
    """Raised when an operation needs a user but nobody is signed in."""


class CurrentUserProvider(Protocol):
    """Authentication collaborator that knows who is signed in."""

    def current_user_id(self) -> UUID | None:
        """Return the signed-in user's id, if any."""


@dataclass
class UserService:
    """Application service resolving the acting user."""

    provider: CurrentUserProvider

    def require_user_id(self) -> UUID:
        """Return the signed-in user's id or raise ``NotSignedInError``."""
        user_id = self.provider.current_user_id()
        if user_id is None:
            raise NotSignedInError("No user is signed in")
        return user_id
