"""
Custom exceptions and error handling for Nomada.

Every failure of the identity core is expressed as one of the error kinds
below. Adapters for upstream services (Clerk, Postgres) translate SDK and
driver errors into these at the boundary, so callers only ever branch on
``ErrorCode``.

Usage:
    from nomada.errors import DuplicateEmailError

    raise DuplicateEmailError("Email already registered: a@b.com")
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for client-facing error messages."""

    # Signup errors
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    DUPLICATE_IDENTIFIER = "DUPLICATE_IDENTIFIER"
    PROFILE_CREATION_FAILED = "PROFILE_CREATION_FAILED"

    # Authentication errors
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_TOKEN = "INVALID_TOKEN"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"

    # Upstream errors
    IDENTITY_PROVIDER_ERROR = "IDENTITY_PROVIDER_ERROR"
    SIGN_OUT_FAILED = "SIGN_OUT_FAILED"
    RESET_REQUEST_FAILED = "RESET_REQUEST_FAILED"
    PROFILE_STORE_ERROR = "PROFILE_STORE_ERROR"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


USER_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.DUPLICATE_EMAIL: "This email is already registered.",
    ErrorCode.DUPLICATE_IDENTIFIER: "Unable to allocate a nomad id. Please try again.",
    ErrorCode.PROFILE_CREATION_FAILED: "Your account could not be created. Please try again.",
    ErrorCode.INVALID_CREDENTIALS: "Incorrect email or password.",
    ErrorCode.INVALID_TOKEN: "Your session is invalid or has expired. Please sign in again.",
    ErrorCode.PROFILE_NOT_FOUND: "Your account profile is unavailable. Please contact support.",
    ErrorCode.IDENTITY_PROVIDER_ERROR: "The authentication service rejected the request.",
    ErrorCode.SIGN_OUT_FAILED: "Unable to sign out. Please try again.",
    ErrorCode.RESET_REQUEST_FAILED: "Unable to send the password reset email. Please try again.",
    ErrorCode.PROFILE_STORE_ERROR: "Unable to reach account storage. Please try again.",
    ErrorCode.VALIDATION_ERROR: "Your request contains invalid information. Please check and try again.",
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred. Please try again.",
}


class NomadaError(Exception):
    """Base exception for all Nomada errors."""

    default_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, code: ErrorCode | None = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)

    @property
    def user_message(self) -> str:
        return USER_MESSAGES.get(self.code, USER_MESSAGES[ErrorCode.INTERNAL_ERROR])


class DuplicateEmailError(NomadaError):
    """Email already has a profile record."""

    default_code = ErrorCode.DUPLICATE_EMAIL


class DuplicateIdentifierError(NomadaError):
    """Nomad id could not be made unique."""

    default_code = ErrorCode.DUPLICATE_IDENTIFIER


class ProfileCreationError(NomadaError):
    """Profile insert failed after the account was created."""

    default_code = ErrorCode.PROFILE_CREATION_FAILED


class InvalidCredentialsError(NomadaError):
    """Identity provider rejected the email/password pair."""

    default_code = ErrorCode.INVALID_CREDENTIALS


class InvalidTokenError(NomadaError):
    """Token is malformed, expired, or references a missing profile."""

    default_code = ErrorCode.INVALID_TOKEN


class ProfileNotFoundError(NomadaError):
    """Account exists but its profile record does not."""

    default_code = ErrorCode.PROFILE_NOT_FOUND


class IdentityProviderError(NomadaError):
    """Identity provider failed; carries the provider's message."""

    default_code = ErrorCode.IDENTITY_PROVIDER_ERROR


class SignOutError(NomadaError):
    default_code = ErrorCode.SIGN_OUT_FAILED


class ResetRequestError(NomadaError):
    default_code = ErrorCode.RESET_REQUEST_FAILED


class ProfileStoreError(NomadaError):
    """Profile store query or write failed."""

    default_code = ErrorCode.PROFILE_STORE_ERROR


class ProfileConflictError(ProfileStoreError):
    """Insert violated a uniqueness constraint on ``field``."""

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"Unique constraint violated on {field}")


class ValidationError(NomadaError):
    """Request payload failed validation."""

    default_code = ErrorCode.VALIDATION_ERROR
