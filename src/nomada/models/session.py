"""Identity provider session models, passed through to callers unmodified."""

from pydantic import BaseModel


class ProviderSession(BaseModel):
    session_id: str
    user_id: str
    token: str | None = None


class ProviderAccount(BaseModel):
    user_id: str
    email: str
    session: ProviderSession
