"""POST /auth/reset-password handler."""

import asyncio
import logging
from typing import Any

from nomada.errors import NomadaError
from nomada.models import EmailRequest, OperationResult
from nomada.responses import error_response, json_response, parse_body
from nomada.services.identity import get_identity_service

logger = logging.getLogger(__name__)


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    try:
        request = parse_body(event, EmailRequest)
        result = asyncio.run(_reset(request.email))
    except NomadaError as e:
        logger.warning("Password reset request failed (%s): %s", e.code.value, e.message)
        return error_response(e)
    except ValueError as e:
        logger.exception("Password reset handler is misconfigured")
        return error_response(NomadaError(str(e)))

    return json_response(200, result)


async def _reset(email: str) -> OperationResult:
    async with get_identity_service() as service:
        return await service.reset_password(email)
