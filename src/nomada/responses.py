"""API Gateway proxy responses for the identity handlers."""

import base64
import binascii
import json
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel

from nomada.errors import ErrorCode, NomadaError, ValidationError

M = TypeVar("M", bound=BaseModel)

STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.DUPLICATE_EMAIL: 409,
    ErrorCode.DUPLICATE_IDENTIFIER: 409,
    ErrorCode.PROFILE_CREATION_FAILED: 500,
    ErrorCode.INVALID_CREDENTIALS: 401,
    ErrorCode.INVALID_TOKEN: 401,
    ErrorCode.PROFILE_NOT_FOUND: 404,
    ErrorCode.IDENTITY_PROVIDER_ERROR: 400,
    ErrorCode.SIGN_OUT_FAILED: 502,
    ErrorCode.RESET_REQUEST_FAILED: 502,
    ErrorCode.PROFILE_STORE_ERROR: 502,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.INTERNAL_ERROR: 500,
}


def json_response(status_code: int, body: dict[str, Any] | BaseModel) -> dict[str, Any]:
    payload = body.model_dump(mode="json") if isinstance(body, BaseModel) else body
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(payload, default=str),
    }


def error_response(error: NomadaError) -> dict[str, Any]:
    """Client-safe error body; the internal message stays in the logs."""
    body: dict[str, Any] = {"success": False, "code": error.code.value, "message": error.user_message}
    # Provider messages (weak password, malformed email) are meant for the user.
    if error.code is ErrorCode.IDENTITY_PROVIDER_ERROR:
        body["detail"] = error.message
    return json_response(STATUS_CODES.get(error.code, 500), body)


def bearer_token(event: dict[str, Any]) -> str | None:
    headers = {k.lower(): v for k, v in (event.get("headers") or {}).items()}
    authorization = headers.get("authorization") or ""
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def parse_body(event: dict[str, Any], model: type[M]) -> M:
    raw = event.get("body") or "{}"
    if event.get("isBase64Encoded"):
        try:
            raw = base64.b64decode(raw, validate=True).decode()
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ValidationError(f"Invalid request body encoding: {e}") from e
    try:
        return model.model_validate_json(raw)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid request body: {e}") from e
