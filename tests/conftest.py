"""Shared test fixtures for Nomada."""

import os
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from dotenv import load_dotenv

# Load .env file for test configuration
load_dotenv()

# Unset AWS_PROFILE for local testing
if "AWS_PROFILE" in os.environ:
    del os.environ["AWS_PROFILE"]

# Add src directory to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from nomada.config import Config  # noqa: E402
from nomada.db.interface import LOOKUP_FIELDS, ProfileStore  # noqa: E402
from nomada.errors import ProfileConflictError  # noqa: E402
from nomada.models import ProfileRecord, ProviderAccount, ProviderSession  # noqa: E402


class InMemoryProfileStore(ProfileStore):
    """Profile store backed by a dict, enforcing the same unique fields as Postgres."""

    UNIQUE_FIELDS = ("id", "email", "nomad_id", "username")

    def __init__(self, records: list[ProfileRecord] | None = None):
        self.records: dict[str, ProfileRecord] = {r.id: r for r in records or []}
        self.lookups: list[tuple[str, str]] = []
        self.closed = False

    async def find_by_field(self, field: str, value: str) -> ProfileRecord | None:
        assert field in LOOKUP_FIELDS
        self.lookups.append((field, value))
        for record in self.records.values():
            if getattr(record, field) == value:
                return record
        return None

    async def insert(self, record: ProfileRecord) -> ProfileRecord:
        for field in self.UNIQUE_FIELDS:
            value = getattr(record, field)
            if value is not None and any(getattr(r, field) == value for r in self.records.values()):
                raise ProfileConflictError(field)
        self.records[record.id] = record
        return record

    async def close(self) -> None:
        self.closed = True


def make_record(**overrides) -> ProfileRecord:
    data = dict(id="user_1", email="ana@example.com", nomad_id="ana", username="ana")
    data.update(overrides)
    return ProfileRecord(**data)


def make_account(user_id: str = "user_new", email: str = "new@example.com") -> ProviderAccount:
    return ProviderAccount(
        user_id=user_id,
        email=email,
        session=ProviderSession(session_id="sess_1", user_id=user_id, token="clerk-jwt"),
    )


@pytest.fixture
def config() -> Config:
    return Config(
        aws_region="us-east-1",
        db_host="localhost",
        db_port=5432,
        db_name="nomada",
        db_user="nomada",
        db_password="localdev",
        password_reset_url="https://nomada.example/reset-password",
        environment="test",
    )


@pytest.fixture
def store() -> InMemoryProfileStore:
    return InMemoryProfileStore()


@pytest.fixture
def provider() -> MagicMock:
    mock = MagicMock()
    mock.create_account = AsyncMock(return_value=make_account())
    mock.authenticate = AsyncMock(return_value=make_account())
    mock.invalidate_session = AsyncMock(return_value=None)
    mock.request_password_reset = AsyncMock(return_value=None)
    mock.delete_account = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def account_factory():
    return make_account
