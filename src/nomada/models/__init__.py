"""
Pydantic models for Nomada.
"""

from nomada.models.profile import ProfileRecord, ProfileSummary, SignupData
from nomada.models.requests import EmailRequest, LoginRequest
from nomada.models.results import AuthResult, EmailAvailability, OperationResult, VerifyResult
from nomada.models.session import ProviderAccount, ProviderSession

__all__ = [
    "AuthResult",
    "EmailAvailability",
    "EmailRequest",
    "LoginRequest",
    "OperationResult",
    "ProfileRecord",
    "ProfileSummary",
    "ProviderAccount",
    "ProviderSession",
    "SignupData",
    "VerifyResult",
]
