"""Account identity and session lifecycle."""

import logging

from nomada.auth.interface import IdentityProvider
from nomada.config import Config
from nomada.db.interface import ProfileStore
from nomada.errors import (
    DuplicateEmailError,
    DuplicateIdentifierError,
    InvalidTokenError,
    ProfileConflictError,
    ProfileCreationError,
    ProfileNotFoundError,
    ProfileStoreError,
)
from nomada.models.profile import ProfileRecord, SignupData, normalize_email
from nomada.models.results import AuthResult, EmailAvailability, OperationResult, VerifyResult
from nomada.models.session import ProviderAccount
from nomada.services.nomad_id import generate_unique_identifier
from nomada.services.saga import Saga, SagaContext, SagaStep

logger = logging.getLogger(__name__)


class IdentityService:
    """Signup, login, logout, token liveness and password reset.

    Credentials and sessions live with the identity provider; this service
    keeps the profile store in step with it. Exactly one profile exists per
    provider account and its primary key is the account's user id.
    """

    def __init__(self, provider: IdentityProvider, store: ProfileStore, config: Config) -> None:
        self._provider = provider
        self._store = store
        self._config = config

    async def generate_unique_identifier(self, candidate_name: str | None) -> str:
        return await generate_unique_identifier(
            self._store,
            candidate_name,
            fallback=self._config.nomad_id_fallback,
            max_suffix=self._config.nomad_id_max_suffix,
        )

    async def signup(self, data: SignupData) -> AuthResult:
        email = normalize_email(data.email)
        if await self._store.find_by_field("email", email) is not None:
            raise DuplicateEmailError(f"Email already registered: {email}")

        seed = data.username or email.split("@", 1)[0]
        nomad_id = await self.generate_unique_identifier(seed)

        async def create_account(context: SagaContext) -> ProviderAccount:
            return await self._provider.create_account(email, data.password)

        async def delete_account(context: SagaContext) -> None:
            account: ProviderAccount = context["create_account"]
            logger.info("Deleting account %s after failed signup", account.user_id)
            await self._provider.delete_account(account.user_id)

        async def create_profile(context: SagaContext) -> ProfileRecord:
            return await self._insert_profile(context["create_account"], data, email, nomad_id, seed)

        saga = Saga(
            "signup",
            [
                SagaStep("create_account", create_account, compensation=delete_account),
                SagaStep("create_profile", create_profile),
            ],
        )
        context = await saga.run()

        account: ProviderAccount = context["create_account"]
        profile: ProfileRecord = context["create_profile"]
        logger.info("Signed up user %s as %s", account.user_id, profile.nomad_id)
        return AuthResult(user=profile.summary(), session=account.session)

    async def _insert_profile(
        self,
        account: ProviderAccount,
        data: SignupData,
        email: str,
        nomad_id: str,
        seed: str,
    ) -> ProfileRecord:
        attempts = self._config.profile_insert_attempts
        for attempt in range(1, attempts + 1):
            record = ProfileRecord(
                id=account.user_id,
                email=email,
                nomad_id=nomad_id,
                username=data.username,
                full_name=data.full_name,
                bio=data.bio,
                avatar_url=data.avatar_url,
                preferences={},
                visited_countries=[],
            )
            try:
                return await self._store.insert(record)
            except ProfileConflictError as e:
                if e.field == "email":
                    raise DuplicateEmailError(f"Email already registered: {email}") from e
                if e.field != "nomad_id":
                    raise ProfileCreationError(f"Error creating profile: {e.message}") from e
                logger.info("Nomad id %s claimed concurrently (attempt %d/%d)", nomad_id, attempt, attempts)
            except ProfileStoreError as e:
                raise ProfileCreationError(f"Error creating profile: {e.message}") from e

            if attempt < attempts:
                try:
                    nomad_id = await self.generate_unique_identifier(seed)
                except ProfileStoreError as e:
                    raise ProfileCreationError(f"Error creating profile: {e.message}") from e

        raise DuplicateIdentifierError(f"Nomad id still conflicting after {attempts} insert attempts")

    async def login(self, email: str, password: str) -> AuthResult:
        account = await self._provider.authenticate(normalize_email(email), password)
        logger.info("Authenticated user %s", account.user_id)

        profile = await self._store.find_by_field("id", account.user_id)
        if profile is None:
            raise ProfileNotFoundError(f"No profile for authenticated user {account.user_id}")

        return AuthResult(user=profile.summary(), session=account.session)

    async def logout(self, session_id: str) -> OperationResult:
        await self._provider.invalidate_session(session_id)
        return OperationResult(success=True, message="Signed out")

    async def verify_token(self, account_handle: str) -> VerifyResult:
        """Check that the profile behind an already signature-verified token still exists."""
        profile = await self._store.find_by_field("id", account_handle)
        if profile is None:
            raise InvalidTokenError(f"Token references unknown user {account_handle}")
        return VerifyResult(valid=True, user=profile)

    async def reset_password(self, email: str) -> OperationResult:
        await self._provider.request_password_reset(email, redirect_to=self._config.password_reset_url)
        return OperationResult(
            success=True,
            message="If the address is registered, a password reset email is on its way",
        )

    async def check_email_available(self, email: str) -> EmailAvailability:
        normalized = normalize_email(email)
        if await self._store.find_by_field("email", normalized) is not None:
            raise DuplicateEmailError(f"Email already registered: {normalized}")
        return EmailAvailability(available=True, normalized_email=normalized)

    async def close(self) -> None:
        await self._store.close()

    async def __aenter__(self) -> "IdentityService":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()


def get_identity_service() -> IdentityService:
    from nomada.auth.interface import get_identity_provider
    from nomada.config import get_config
    from nomada.db.postgres import PostgresProfileStore

    config = get_config()
    return IdentityService(get_identity_provider(), PostgresProfileStore(config), config)
