"""Authentication abstraction layer."""

from nomada.auth.clerk_provider import ClerkIdentityProvider
from nomada.auth.interface import IdentityProvider, get_identity_provider
from nomada.auth.tokens import TokenSigner, get_token_signer

__all__ = ["ClerkIdentityProvider", "IdentityProvider", "TokenSigner", "get_identity_provider", "get_token_signer"]
