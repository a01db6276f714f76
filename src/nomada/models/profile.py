from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator


def normalize_email(email: str) -> str:
    return email.strip().lower()


class ProfileRecord(BaseModel):
    id: str
    email: str
    nomad_id: str
    username: str | None = None
    full_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    preferences: dict[str, Any] = {}
    visited_countries: list[str] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def summary(self) -> "ProfileSummary":
        return ProfileSummary(
            id=self.id,
            nomad_id=self.nomad_id,
            username=self.username,
            email=self.email,
            avatar_url=self.avatar_url,
            bio=self.bio,
        )


class ProfileSummary(BaseModel):
    """Public projection of a profile returned by signup and login."""

    id: str
    nomad_id: str
    username: str | None = None
    email: str
    avatar_url: str | None = None
    bio: str | None = None


class SignupData(BaseModel):
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=8, max_length=128)
    username: str | None = Field(default=None, min_length=3, max_length=64)
    full_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None

    @field_validator("email", mode="before")
    @classmethod
    def lower_case_email(cls, value: object) -> object:
        return normalize_email(value) if isinstance(value, str) else value
