"""Postgres profile store: connection management, lookups and inserts."""

import json
import logging
from typing import Any

import psycopg
from psycopg import errors as pg_errors
from psycopg import sql
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from nomada.config import Config
from nomada.db.interface import LOOKUP_FIELDS, ProfileStore
from nomada.errors import ProfileConflictError, ProfileStoreError
from nomada.models.profile import ProfileRecord

logger = logging.getLogger(__name__)

# Model field -> table column
_COLUMNS: dict[str, str] = {
    "id": "id",
    "email": "email",
    "nomad_id": "nomada_id",
    "username": "username",
    "full_name": "full_name",
    "bio": "bio",
    "avatar_url": "avatar_url",
    "preferences": "preferences",
    "visited_countries": "visited_countries",
    "created_at": "created_at",
    "updated_at": "updated_at",
}

# Checked in order; "nomada_id" must win over the bare "id" of the primary key.
_CONSTRAINT_FIELDS = (("nomada_id", "nomad_id"), ("username", "username"), ("email", "email"))


class PostgresProfileStore(ProfileStore):
    def __init__(self, config: Config) -> None:
        self._config = config
        self._table = sql.Identifier(config.profiles_table)
        self._conn: psycopg.AsyncConnection[dict[str, Any]] | None = None
        self._secret_cache: dict[str, str] | None = None

    def _get_credentials(self) -> dict[str, str]:
        if self._config.db_secret_arn:
            if self._secret_cache is None:
                from nomada.clients import get_secrets_client

                secret = get_secrets_client().get_secret_value(SecretId=self._config.db_secret_arn)
                self._secret_cache = json.loads(secret["SecretString"])
            return self._secret_cache
        return {
            "host": self._config.db_host,
            "port": str(self._config.db_port),
            "dbname": self._config.db_name,
            "user": self._config.db_user,
            "password": self._config.db_password,
        }

    async def connect(self) -> None:
        creds = self._get_credentials()
        try:
            self._conn = await psycopg.AsyncConnection.connect(
                host=creds.get("host", self._config.db_host),
                port=int(creds.get("port", self._config.db_port)),
                dbname=creds.get("dbname", self._config.db_name),
                user=creds.get("username", creds.get("user", self._config.db_user)),
                password=creds.get("password", self._config.db_password),
                autocommit=True,
                row_factory=dict_row,
            )
        except psycopg.Error as e:
            raise ProfileStoreError(f"Profile store connection failed: {e}") from e

    async def close(self) -> None:
        if self._conn is not None and not self._conn.closed:
            await self._conn.close()
        self._conn = None

    async def _require_connection(self) -> psycopg.AsyncConnection[dict[str, Any]]:
        """Return the active connection, connecting on first use."""
        if self._conn is None or self._conn.closed:
            await self.connect()
        if self._conn is None:
            raise ProfileStoreError("Profile store is not connected")
        return self._conn

    async def find_by_field(self, field: str, value: str) -> ProfileRecord | None:
        if field not in LOOKUP_FIELDS:
            raise ValueError(f"Unsupported lookup field: {field}")

        query = sql.SQL("SELECT {columns} FROM {table} WHERE {column} = %s LIMIT 1").format(
            columns=_select_list(),
            table=self._table,
            column=sql.Identifier(_COLUMNS[field]),
        )
        conn = await self._require_connection()
        try:
            async with conn.cursor() as cur:
                await cur.execute(query, (value,))
                row = await cur.fetchone()
        except pg_errors.InvalidTextRepresentation:
            # A malformed uuid can never match a primary key.
            return None
        except psycopg.Error as e:
            raise ProfileStoreError(f"Profile lookup by {field} failed: {e}") from e

        return _to_record(row) if row else None

    async def insert(self, record: ProfileRecord) -> ProfileRecord:
        values = record.model_dump(exclude_none=True)
        if "preferences" in values:
            values["preferences"] = Jsonb(values["preferences"])
        fields = list(values)

        query = sql.SQL("INSERT INTO {table} ({columns}) VALUES ({placeholders}) RETURNING {returning}").format(
            table=self._table,
            columns=sql.SQL(", ").join(sql.Identifier(_COLUMNS[f]) for f in fields),
            placeholders=sql.SQL(", ").join(sql.Placeholder() * len(fields)),
            returning=_select_list(),
        )
        conn = await self._require_connection()
        try:
            async with conn.cursor() as cur:
                await cur.execute(query, [values[f] for f in fields])
                row = await cur.fetchone()
        except pg_errors.UniqueViolation as e:
            field = _conflict_field(e.diag.constraint_name)
            raise ProfileConflictError(field, f"Profile with this {field} already exists") from e
        except psycopg.Error as e:
            raise ProfileStoreError(f"Profile insert failed: {e}") from e

        if row is None:
            raise ProfileStoreError("Profile insert returned no row")
        logger.info("Inserted profile %s", record.id)
        return _to_record(row)

    async def __aenter__(self) -> "PostgresProfileStore":
        await self.connect()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()


def _select_list() -> sql.Composable:
    return sql.SQL(", ").join(sql.Identifier(column) for column in _COLUMNS.values())


def _to_record(row: dict[str, Any]) -> ProfileRecord:
    data = {field: row.get(column) for field, column in _COLUMNS.items()}
    data["id"] = str(data["id"])
    data["preferences"] = data["preferences"] or {}
    data["visited_countries"] = data["visited_countries"] or []
    return ProfileRecord(**data)


def _conflict_field(constraint_name: str | None) -> str:
    name = constraint_name or ""
    for fragment, field in _CONSTRAINT_FIELDS:
        if fragment in name:
            return field
    return "id"
