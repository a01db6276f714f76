"""Return shapes of the identity service operations."""

from pydantic import BaseModel

from nomada.models.profile import ProfileRecord, ProfileSummary
from nomada.models.session import ProviderSession


class AuthResult(BaseModel):
    user: ProfileSummary
    session: ProviderSession


class VerifyResult(BaseModel):
    valid: bool
    user: ProfileRecord


class OperationResult(BaseModel):
    success: bool
    message: str = ""


class EmailAvailability(BaseModel):
    available: bool
    normalized_email: str
