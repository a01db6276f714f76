from os import environ

import boto3
from pydantic import BaseModel, ConfigDict, Field

_cached_clerk_secret: str | None = None


def _resolve_clerk_secret() -> str:
    """Fetch Clerk secret from Secrets Manager at runtime, with caching."""
    global _cached_clerk_secret
    if _cached_clerk_secret is not None:
        return _cached_clerk_secret

    # Local dev: use env var directly
    direct = environ.get("CLERK_SECRET_KEY", "")
    if direct:
        _cached_clerk_secret = direct
        return direct

    # Deployed: fetch from Secrets Manager by ARN
    arn = environ.get("CLERK_SECRET_ARN", "")
    if not arn:
        return ""

    client = boto3.client("secretsmanager")
    _cached_clerk_secret = client.get_secret_value(SecretId=arn)["SecretString"]
    return _cached_clerk_secret


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    aws_region: str
    db_host: str
    db_port: int
    db_name: str
    db_user: str
    db_password: str
    db_secret_arn: str | None = None
    profiles_table: str = "users"
    clerk_secret_key: str = ""
    jwt_secret: str = ""
    jwt_expiry_seconds: int = Field(default=86400, gt=0)
    password_reset_url: str
    reset_email_sender: str = ""
    reset_token_ttl_seconds: int = Field(default=3600, gt=0)
    ses_endpoint: str | None = None
    nomad_id_fallback: str = "nomada"
    # Two suffix digits keep identifiers within 12 characters.
    nomad_id_max_suffix: int = Field(default=20, ge=0, le=99)
    profile_insert_attempts: int = Field(default=3, ge=1)
    environment: str


_cached_config: Config | None = None


def _reset_config() -> None:
    """Reset cached config. For testing only."""
    global _cached_config, _cached_clerk_secret
    _cached_config = None
    _cached_clerk_secret = None


def get_config() -> Config:
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    _cached_config = Config(
        aws_region=environ.get("AWS_REGION", "us-east-1"),
        db_host=environ.get("DB_HOST", "localhost"),
        db_port=int(environ.get("DB_PORT", "5432")),
        db_name=environ.get("DB_NAME", "nomada"),
        db_user=environ.get("DB_USER", "nomada"),
        db_password=environ.get("DB_PASSWORD", "localdev"),
        db_secret_arn=environ.get("DB_SECRET_ARN"),
        profiles_table=environ.get("PROFILES_TABLE", "users"),
        clerk_secret_key=_resolve_clerk_secret(),
        jwt_secret=environ.get("JWT_SECRET", ""),
        jwt_expiry_seconds=int(environ.get("JWT_EXPIRY_SECONDS", "86400")),
        password_reset_url=environ.get("PASSWORD_RESET_URL", "http://localhost:3000/reset-password"),
        reset_email_sender=environ.get("RESET_EMAIL_SENDER", ""),
        reset_token_ttl_seconds=int(environ.get("RESET_TOKEN_TTL_SECONDS", "3600")),
        ses_endpoint=environ.get("SES_ENDPOINT"),
        nomad_id_fallback=environ.get("NOMAD_ID_FALLBACK", "nomada"),
        nomad_id_max_suffix=int(environ.get("NOMAD_ID_MAX_SUFFIX", "20")),
        profile_insert_attempts=int(environ.get("PROFILE_INSERT_ATTEMPTS", "3")),
        environment=environ.get("ENVIRONMENT", "local"),
    )
    return _cached_config
