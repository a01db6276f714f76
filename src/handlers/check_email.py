"""GET /auth/check-email?email=... handler."""

import asyncio
import logging
from typing import Any

from nomada.errors import NomadaError, ValidationError
from nomada.models import EmailAvailability
from nomada.responses import error_response, json_response
from nomada.services.identity import get_identity_service

logger = logging.getLogger(__name__)


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    query_params = event.get("queryStringParameters") or {}
    try:
        email = query_params.get("email", "")
        if not email.strip():
            raise ValidationError("Missing email query parameter")
        result = asyncio.run(_check(email))
    except NomadaError as e:
        return error_response(e)
    except ValueError as e:
        logger.exception("Email check handler is misconfigured")
        return error_response(NomadaError(str(e)))

    return json_response(200, result)


async def _check(email: str) -> EmailAvailability:
    async with get_identity_service() as service:
        return await service.check_email_available(email)
