"""
Outward-facing access tokens.

The HTTP layer mints one of these after signup or login and checks it on
every authenticated request. Claims carry the account handle (``sub``), the
email, and the identity provider session id (``sid``) needed to sign out.
"""

from time import time
from typing import Any

import jwt

from nomada.errors import InvalidTokenError

_ALGORITHM = "HS256"


class TokenSigner:
    def __init__(self, secret: str, expiry_seconds: int = 86400):
        self._secret = secret
        self._expiry_seconds = expiry_seconds

    def sign(self, user_id: str, email: str, session_id: str | None = None) -> str:
        issued_at = int(time())
        claims: dict[str, Any] = {
            "sub": user_id,
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self._expiry_seconds,
        }
        if session_id:
            claims["sid"] = session_id
        return jwt.encode(claims, self._secret, algorithm=_ALGORITHM)

    def verify(self, token: str) -> dict[str, Any]:
        """Validate signature and expiry, returning the claims."""
        try:
            claims: dict[str, Any] = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e
        return claims


def get_token_signer() -> TokenSigner:
    from nomada.config import get_config

    config = get_config()
    if not config.jwt_secret:
        raise ValueError("JWT_SECRET not configured")
    return TokenSigner(secret=config.jwt_secret, expiry_seconds=config.jwt_expiry_seconds)
