import logging
from typing import Any
from urllib.parse import urlencode

from clerk_backend_api import Clerk, models

from nomada.errors import (
    IdentityProviderError,
    InvalidCredentialsError,
    ResetRequestError,
    SignOutError,
)
from nomada.models.session import ProviderAccount, ProviderSession
from nomada.services.mailer import PasswordResetMailer

from .interface import IdentityProvider

logger = logging.getLogger(__name__)


class ClerkIdentityProvider(IdentityProvider):
    """Clerk Backend API adapter.

    Clerk only creates real sessions from its frontend flows, so the backend
    session handle is a sign-in token: issued on signup and login, kept
    server-side, and revoked on logout. Its lifetime matches the outward token.
    """

    def __init__(
        self,
        secret_key: str,
        mailer: PasswordResetMailer,
        reset_token_ttl_seconds: int = 3600,
        session_ttl_seconds: int = 86400,
    ):
        self._client = Clerk(bearer_auth=secret_key)
        self._mailer = mailer
        self._reset_token_ttl_seconds = reset_token_ttl_seconds
        self._session_ttl_seconds = session_ttl_seconds

    async def create_account(self, email: str, password: str) -> ProviderAccount:
        try:
            user = self._client.users.create(email_address=[email], password=password)
        except Exception as e:
            raise IdentityProviderError(f"Account creation failed: {_describe(e)}") from e

        try:
            session = self._open_session(user.id)
        except Exception as e:
            # No session was issued, so remove the account again.
            self._discard_user(user.id)
            raise IdentityProviderError(f"Session creation failed: {_describe(e)}") from e

        return ProviderAccount(user_id=user.id, email=_primary_email(user) or email, session=session)

    async def authenticate(self, email: str, password: str) -> ProviderAccount:
        user = self._find_user(email)
        if user is None:
            raise InvalidCredentialsError("Invalid email or password")

        try:
            result = self._client.users.verify_password(user_id=user.id, password=password)
        except models.ClerkErrors as e:
            raise InvalidCredentialsError("Invalid email or password") from e
        except Exception as e:
            raise IdentityProviderError(f"Password verification failed: {_describe(e)}") from e
        if result is None or not result.verified:
            raise InvalidCredentialsError("Invalid email or password")

        try:
            session = self._open_session(user.id)
        except Exception as e:
            raise IdentityProviderError(f"Session creation failed: {_describe(e)}") from e

        return ProviderAccount(user_id=user.id, email=_primary_email(user) or email, session=session)

    async def invalidate_session(self, session_id: str) -> None:
        try:
            self._client.sign_in_tokens.revoke(sign_in_token_id=session_id)
        except Exception as e:
            raise SignOutError(f"Session revocation failed: {_describe(e)}") from e

    async def request_password_reset(self, email: str, redirect_to: str) -> None:
        try:
            user = self._find_user(email)
            if user is None:
                # Unknown addresses succeed silently, same as known ones.
                logger.info("Password reset requested for unknown address")
                return
            sign_in_token = self._client.sign_in_tokens.create(
                request={"user_id": user.id, "expires_in_seconds": self._reset_token_ttl_seconds}
            )
        except IdentityProviderError as e:
            raise ResetRequestError(e.message) from e
        except Exception as e:
            raise ResetRequestError(f"Reset token creation failed: {_describe(e)}") from e

        link = f"{redirect_to}?{urlencode({'ticket': sign_in_token.token})}"
        await self._mailer.send_reset_link(email, link)

    async def delete_account(self, user_id: str) -> None:
        try:
            self._client.users.delete(user_id=user_id)
        except Exception as e:
            raise IdentityProviderError(f"Account deletion failed: {_describe(e)}") from e

    def _find_user(self, email: str) -> Any | None:
        try:
            users = self._client.users.list(request={"email_address": [email]})
        except Exception as e:
            raise IdentityProviderError(f"User lookup failed: {_describe(e)}") from e
        return users[0] if users else None

    def _open_session(self, user_id: str) -> ProviderSession:
        # The ticket itself never leaves the backend; only its id is handed out.
        sign_in_token = self._client.sign_in_tokens.create(
            request={"user_id": user_id, "expires_in_seconds": self._session_ttl_seconds}
        )
        return ProviderSession(session_id=sign_in_token.id, user_id=user_id)

    def _discard_user(self, user_id: str) -> None:
        try:
            self._client.users.delete(user_id=user_id)
        except Exception:
            logger.exception("Failed to discard Clerk user %s", user_id)


def _primary_email(user: Any) -> str:
    return user.email_addresses[0].email_address if user.email_addresses else ""


def _describe(error: Exception) -> str:
    """Pull the human-readable message out of a Clerk error payload when there is one."""
    errors = getattr(getattr(error, "data", None), "errors", None)
    if errors:
        first = errors[0]
        return getattr(first, "long_message", None) or getattr(first, "message", None) or str(error)
    return str(error)
