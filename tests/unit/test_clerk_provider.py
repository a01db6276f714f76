from unittest.mock import AsyncMock, MagicMock, create_autospec, patch

import pytest
from clerk_backend_api import Clerk

from nomada.auth.clerk_provider import ClerkIdentityProvider
from nomada.errors import (
    IdentityProviderError,
    InvalidCredentialsError,
    ResetRequestError,
    SignOutError,
)
from nomada.models import ProviderAccount


@pytest.fixture
def mock_clerk_user():
    user = MagicMock()
    user.id = "user_123"
    user.email_addresses = [MagicMock(email_address="jane@example.com")]
    return user


@pytest.fixture
def mock_client(mock_clerk_user):
    """Clerk client whose sub-SDKs keep the real method signatures."""
    sdk = Clerk(bearer_auth="sk_test_mock")
    client = MagicMock(spec_set=["users", "sign_in_tokens"])
    client.users = create_autospec(type(sdk.users), instance=True)
    client.sign_in_tokens = create_autospec(type(sdk.sign_in_tokens), instance=True)

    client.users.create.return_value = mock_clerk_user
    client.users.list.return_value = [mock_clerk_user]
    client.users.verify_password.return_value = MagicMock(verified=True)
    client.sign_in_tokens.create.return_value = MagicMock(id="sit_123", token="ticket_abc")
    return client


@pytest.fixture
def mailer():
    mock = MagicMock()
    mock.send_reset_link = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def provider(mock_client, mailer):
    with patch("nomada.auth.clerk_provider.Clerk") as mock_clerk_class:
        mock_clerk_class.return_value = mock_client
        yield ClerkIdentityProvider(
            secret_key="sk_test_mock",
            mailer=mailer,
            reset_token_ttl_seconds=900,
            session_ttl_seconds=7200,
        )


@pytest.mark.asyncio
async def test_create_account(provider, mock_client):
    account = await provider.create_account("jane@example.com", "s3cret-pass")

    assert isinstance(account, ProviderAccount)
    assert account.user_id == "user_123"
    assert account.email == "jane@example.com"
    assert account.session.session_id == "sit_123"
    assert account.session.user_id == "user_123"
    mock_client.users.create.assert_called_once_with(email_address=["jane@example.com"], password="s3cret-pass")
    mock_client.sign_in_tokens.create.assert_called_once_with(
        request={"user_id": "user_123", "expires_in_seconds": 7200}
    )


@pytest.mark.asyncio
async def test_session_ticket_is_not_handed_out(provider):
    account = await provider.create_account("jane@example.com", "s3cret-pass")

    assert account.session.token is None


@pytest.mark.asyncio
async def test_create_account_passes_provider_message(provider, mock_client):
    mock_client.users.create.side_effect = Exception("Password has been found in an online data breach")

    with pytest.raises(IdentityProviderError, match="online data breach"):
        await provider.create_account("jane@example.com", "password")


@pytest.mark.asyncio
async def test_create_account_discards_user_when_session_fails(provider, mock_client):
    mock_client.sign_in_tokens.create.side_effect = Exception("sign-in tokens unavailable")

    with pytest.raises(IdentityProviderError, match="Session creation failed"):
        await provider.create_account("jane@example.com", "s3cret-pass")

    mock_client.users.delete.assert_called_once_with(user_id="user_123")


@pytest.mark.asyncio
async def test_authenticate(provider, mock_client):
    account = await provider.authenticate("jane@example.com", "s3cret-pass")

    assert account.user_id == "user_123"
    assert account.session.session_id == "sit_123"
    mock_client.users.list.assert_called_once_with(request={"email_address": ["jane@example.com"]})
    mock_client.users.verify_password.assert_called_once_with(user_id="user_123", password="s3cret-pass")


@pytest.mark.asyncio
async def test_authenticate_unknown_email(provider, mock_client):
    mock_client.users.list.return_value = []

    with pytest.raises(InvalidCredentialsError):
        await provider.authenticate("nobody@example.com", "s3cret-pass")

    mock_client.users.verify_password.assert_not_called()
    mock_client.sign_in_tokens.create.assert_not_called()


@pytest.mark.asyncio
async def test_authenticate_wrong_password(provider, mock_client):
    mock_client.users.verify_password.return_value = MagicMock(verified=False)

    with pytest.raises(InvalidCredentialsError):
        await provider.authenticate("jane@example.com", "wrong")

    mock_client.sign_in_tokens.create.assert_not_called()


@pytest.mark.asyncio
async def test_authenticate_lookup_outage(provider, mock_client):
    mock_client.users.list.side_effect = Exception("503 Service Unavailable")

    with pytest.raises(IdentityProviderError, match="User lookup failed"):
        await provider.authenticate("jane@example.com", "s3cret-pass")


@pytest.mark.asyncio
async def test_invalidate_session(provider, mock_client):
    await provider.invalidate_session("sit_123")
    mock_client.sign_in_tokens.revoke.assert_called_once_with(sign_in_token_id="sit_123")


@pytest.mark.asyncio
async def test_invalidate_session_failure(provider, mock_client):
    mock_client.sign_in_tokens.revoke.side_effect = Exception("sign in token not found")

    with pytest.raises(SignOutError, match="not found"):
        await provider.invalidate_session("sit_123")


@pytest.mark.asyncio
async def test_request_password_reset_mails_ticket_link(provider, mock_client, mailer):
    await provider.request_password_reset("jane@example.com", "https://nomada.example/reset")

    mock_client.sign_in_tokens.create.assert_called_once_with(
        request={"user_id": "user_123", "expires_in_seconds": 900}
    )
    mailer.send_reset_link.assert_awaited_once_with(
        "jane@example.com", "https://nomada.example/reset?ticket=ticket_abc"
    )


@pytest.mark.asyncio
async def test_request_password_reset_unknown_email_is_silent(provider, mock_client, mailer):
    mock_client.users.list.return_value = []

    await provider.request_password_reset("nobody@example.com", "https://nomada.example/reset")

    mock_client.sign_in_tokens.create.assert_not_called()
    mailer.send_reset_link.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("registered", [True, False])
async def test_request_password_reset_same_outcome_for_any_address(provider, mock_client, mock_clerk_user, registered):
    mock_client.users.list.return_value = [mock_clerk_user] if registered else []

    assert await provider.request_password_reset("jane@example.com", "https://nomada.example/reset") is None


@pytest.mark.asyncio
async def test_request_password_reset_failure(provider, mock_client):
    mock_client.sign_in_tokens.create.side_effect = Exception("rate limited")

    with pytest.raises(ResetRequestError, match="rate limited"):
        await provider.request_password_reset("jane@example.com", "https://nomada.example/reset")


@pytest.mark.asyncio
async def test_request_password_reset_lookup_failure(provider, mock_client):
    mock_client.users.list.side_effect = Exception("503 Service Unavailable")

    with pytest.raises(ResetRequestError):
        await provider.request_password_reset("jane@example.com", "https://nomada.example/reset")


@pytest.mark.asyncio
async def test_delete_account(provider, mock_client):
    await provider.delete_account("user_123")
    mock_client.users.delete.assert_called_once_with(user_id="user_123")


@pytest.mark.asyncio
async def test_delete_account_failure(provider, mock_client):
    mock_client.users.delete.side_effect = Exception("not found")

    with pytest.raises(IdentityProviderError, match="Account deletion failed"):
        await provider.delete_account("user_123")
