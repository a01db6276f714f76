"""POST /auth/logout handler. Revokes the provider session named in the token."""

import asyncio
import logging
from typing import Any

from nomada.auth import get_token_signer
from nomada.errors import InvalidTokenError, NomadaError
from nomada.models import OperationResult
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
        session_id = claims.get("sid")
        if not session_id:
            raise InvalidTokenError("Token carries no session id")
        result = asyncio.run(_logout(str(session_id)))
    except NomadaError as e:
        logger.warning("Logout failed (%s): %s", e.code.value, e.message)
        return error_response(e)
    except ValueError as e:
        logger.exception("Logout handler is misconfigured")
        return error_response(NomadaError(str(e)))

    return json_response(200, result)


async def _logout(session_id: str) -> OperationResult:
    async with get_identity_service() as service:
        return await service.logout(session_id)
