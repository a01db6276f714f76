import base64
import json

import pytest

from nomada.errors import ErrorCode, IdentityProviderError, ProfileCreationError, ValidationError
from nomada.models import EmailRequest
from nomada.responses import STATUS_CODES, bearer_token, error_response, json_response, parse_body


def test_every_error_code_has_a_status():
    for code in ErrorCode:
        assert code in STATUS_CODES


def test_json_response_dumps_models():
    response = json_response(200, EmailRequest(email="ana@example.com"))
    assert response["statusCode"] == 200
    assert response["headers"]["Content-Type"] == "application/json"
    assert json.loads(response["body"]) == {"email": "ana@example.com"}


def test_error_response_hides_internal_message():
    response = error_response(ProfileCreationError("insert into users failed: relation missing"))
    body = json.loads(response["body"])
    assert response["statusCode"] == 500
    assert body == {
        "success": False,
        "code": "PROFILE_CREATION_FAILED",
        "message": "Your account could not be created. Please try again.",
    }


def test_error_response_passes_provider_message_through():
    body = json.loads(error_response(IdentityProviderError("Passwords must be 8 characters or more."))["body"])
    assert body["detail"] == "Passwords must be 8 characters or more."


@pytest.mark.parametrize(
    "headers, expected",
    [
        ({"Authorization": "Bearer abc.def"}, "abc.def"),
        ({"authorization": "bearer abc.def "}, "abc.def"),
        ({"Authorization": "Basic dXNlcg=="}, None),
        ({"Authorization": "Bearer "}, None),
        ({}, None),
        (None, None),
    ],
)
def test_bearer_token(headers, expected):
    assert bearer_token({"headers": headers}) == expected


def test_parse_body_invalid_json():
    with pytest.raises(ValidationError, match="Invalid request body"):
        parse_body({"body": "{not json"}, EmailRequest)


def test_parse_body_missing_body():
    with pytest.raises(ValidationError):
        parse_body({}, EmailRequest)


@pytest.mark.parametrize("body", ["%%%not-base64", base64.b64encode(b"\xff\xfe").decode()])
def test_parse_body_bad_base64_body(body):
    with pytest.raises(ValidationError, match="Invalid request body encoding"):
        parse_body({"body": body, "isBase64Encoded": True}, EmailRequest)
