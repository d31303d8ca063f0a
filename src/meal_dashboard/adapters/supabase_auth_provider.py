"""Supabase Auth implementation of the current-user provider."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from meal_dashboard.services.users import CurrentUserProvider


@dataclass
class SupabaseAuthProvider(CurrentUserProvider):
    """Reads the signed-in user from the Supabase auth session."""

    client: Client

    def current_user_id(self) -> UUID | None:
        """Return the id of the signed-in user, if any."""
        response = self.client.auth.get_user()
        if response is None or response.user is None:
            return None
        return UUID(str(response.user.id))
