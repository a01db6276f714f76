"""GET /auth/verify handler.

Checks the token signature here, then asks the identity service whether the
profile it names still exists.
"""

import asyncio
import logging
from typing import Any

from nomada.auth import get_token_signer
from nomada.errors import InvalidTokenError, NomadaError
from nomada.models import VerifyResult
from nomada.responses import bearer_token, error_response, json_response
from nomada.services.identity import get_identity_service

logger = logging.getLogger(__name__)


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    try:
        signer = get_token_signer()
        token = bearer_token(event)
        if token is None:
            raise InvalidTokenError("Missing bearer token")
        claims = signer.verify(token)
        result = asyncio.run(_verify(str(claims["sub"])))
    except NomadaError as e:
        return error_response(e)
    except ValueError as e:
        logger.exception("Token verification handler is misconfigured")
        return error_response(NomadaError(str(e)))

    return json_response(200, result)


async def _verify(account_handle: str) -> VerifyResult:
    async with get_identity_service() as service:
        return await service.verify_token(account_handle)
