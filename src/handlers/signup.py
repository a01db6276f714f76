"""POST /auth/signup handler."""

import asyncio
import logging
from typing import Any

from nomada.auth import get_token_signer
from nomada.errors import NomadaError
from nomada.models import AuthResult, SignupData
from nomada.responses import error_response, json_response, parse_body
from nomada.services.identity import get_identity_service

logger = logging.getLogger(__name__)


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    try:
        signer = get_token_signer()
        data = parse_body(event, SignupData)
        result = asyncio.run(_signup(data))
    except NomadaError as e:
        logger.warning("Signup failed (%s): %s", e.code.value, e.message)
        return error_response(e)
    except ValueError as e:
        logger.exception("Signup handler is misconfigured")
        return error_response(NomadaError(str(e)))

    token = signer.sign(result.user.id, result.user.email, result.session.session_id)
    return json_response(
        201,
        {
            "success": True,
            "message": "User registered",
            "user": result.user.model_dump(mode="json"),
            "token": token,
        },
    )


async def _signup(data: SignupData) -> AuthResult:
    async with get_identity_service() as service:
        return await service.signup(data)
