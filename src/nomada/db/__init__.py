"""
Profile persistence for Nomada.

The profile table itself is provisioned outside this repository; these
clients only read and insert rows.
"""

from nomada.db.interface import LOOKUP_FIELDS, ProfileStore
from nomada.db.postgres import PostgresProfileStore

__all__ = ["LOOKUP_FIELDS", "PostgresProfileStore", "ProfileStore"]
