from abc import ABC, abstractmethod

from nomada.models.session import ProviderAccount


class IdentityProvider(ABC):
    """Credential storage, password checks and sessions, owned by an external service."""

    @abstractmethod
    async def create_account(self, email: str, password: str) -> ProviderAccount: ...

    @abstractmethod
    async def authenticate(self, email: str, password: str) -> ProviderAccount: ...

    @abstractmethod
    async def invalidate_session(self, session_id: str) -> None: ...

    @abstractmethod
    async def request_password_reset(self, email: str, redirect_to: str) -> None: ...

    @abstractmethod
    async def delete_account(self, user_id: str) -> None: ...


def get_identity_provider() -> IdentityProvider:
    from nomada.config import get_config

    config = get_config()
    clerk_secret = config.clerk_secret_key
    if not clerk_secret:
        raise ValueError("CLERK_SECRET_KEY not configured")
    if not config.reset_email_sender:
        raise ValueError("RESET_EMAIL_SENDER not configured")

    from nomada.auth.clerk_provider import ClerkIdentityProvider
    from nomada.clients import get_ses_client
    from nomada.services.mailer import PasswordResetMailer

    mailer = PasswordResetMailer(get_ses_client(), sender=config.reset_email_sender)
    return ClerkIdentityProvider(
        secret_key=clerk_secret,
        mailer=mailer,
        reset_token_ttl_seconds=config.reset_token_ttl_seconds,
        session_ttl_seconds=config.jwt_expiry_seconds,
    )
