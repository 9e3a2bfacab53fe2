"""Access to the hosted auth provider (Supabase Auth): token checks, invitations and bans."""
from functools import lru_cache
from typing import Optional
from uuid import UUID

from supabase import Client, create_client

from inventra.core.config import settings
from inventra.core.errors import UpstreamError
from inventra.core.logging_config import get_logger

logger = get_logger("auth")

# about ten years; the provider has no permanent ban
BAN_DURATION = "87600h"


class SupabaseAuth:
    """Resolves access tokens to user ids and manages provider users (invites, bans)."""

    def __init__(self, url: str, key: str):
        self._url = url
        self._key = key
        self._client: Optional[Client] = None

    @property
    def configured(self) -> bool:
        return bool(self._url and self._key)

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = create_client(self._url, self._key)
        return self._client

    def user_id_for(self, token: str) -> Optional[UUID]:
        """The user id behind ``token``, or None if the provider does not accept it."""
        if not self.configured:
            logger.error("auth_provider_not_configured")
            return None
        try:
            response = self.client.auth.get_user(token)
        except Exception:
            # the provider raises its own error types for expired or forged tokens
            logger.info("token_rejected", exc_info=True)
            return None
        if response is None or response.user is None:
            return None
        return UUID(str(response.user.id))

    def invite_user(self, email: str, redirect_to: Optional[str] = None) -> UUID:
        """Send the provider's invitation email and return the new user's id."""
        if not self.configured:
            raise UpstreamError("Auth provider is not configured")
        options = {"redirect_to": redirect_to} if redirect_to else {}
        try:
            response = self.client.auth.admin.invite_user_by_email(email, options)
        except Exception as exc:
            logger.warning("invite_failed", exc_info=True, extra={"email": email})
            raise UpstreamError(f"Invite failed: {exc}") from exc
        if response is None or response.user is None:
            raise UpstreamError("Invite failed")
        return UUID(str(response.user.id))

    def set_blocked(self, user_id: UUID, blocked: bool) -> None:
        """Ban or unban a user at the provider so their sessions stop working."""
        if not self.configured:
            raise UpstreamError("Auth provider is not configured")
        attributes = {"ban_duration": BAN_DURATION if blocked else "none"}
        try:
            self.client.auth.admin.update_user_by_id(str(user_id), attributes)
        except Exception as exc:
            logger.warning("block_update_failed", exc_info=True, extra={"user_id": str(user_id), "blocked": blocked})
            raise UpstreamError(f"Could not update user: {exc}") from exc


@lru_cache
def get_auth_provider() -> SupabaseAuth:
    return SupabaseAuth(settings.SUPABASE_URL, settings.SUPABASE_KEY)
