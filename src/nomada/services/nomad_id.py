"""Human-readable unique identifier ("nomad id") allocation."""

import logging
import re
import secrets
import string

from nomada.db.interface import ProfileStore
from nomada.errors import DuplicateIdentifierError

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK = "nomada"
MAX_BASE_LENGTH = 10
MAX_IDENTIFIER_LENGTH = 12
RANDOM_SUFFIX_LENGTH = 4
RANDOM_ATTEMPTS = 5

_DISALLOWED = re.compile(r"[^a-z0-9]")
_ALPHABET = string.ascii_lowercase + string.digits


def normalize_candidate(candidate_name: str | None, fallback: str = DEFAULT_FALLBACK) -> str:
    """Lower-case, strip non-alphanumerics and truncate; never returns an empty string."""
    base = _DISALLOWED.sub("", (candidate_name or fallback).lower())[:MAX_BASE_LENGTH]
    if base:
        return base
    return _DISALLOWED.sub("", fallback.lower())[:MAX_BASE_LENGTH] or DEFAULT_FALLBACK


async def generate_unique_identifier(
    store: ProfileStore,
    candidate_name: str | None,
    fallback: str = DEFAULT_FALLBACK,
    max_suffix: int = 20,
) -> str:
    """Return a nomad id not held by any profile at the time of the check.

    Tries the bare base, then base1..base<max_suffix>. When every numbered
    suffix is taken, falls back to a few random suffixes before giving up.
    The store's unique constraint stays authoritative: a concurrent signup can
    still claim the returned id before it is inserted.
    """
    base = normalize_candidate(candidate_name, fallback)

    for suffix in range(max_suffix + 1):
        candidate = base if suffix == 0 else f"{base}{suffix}"
        if await store.find_by_field("nomad_id", candidate) is None:
            return candidate

    logger.warning("Numbered nomad ids exhausted for base %s, trying random suffixes", base)
    stem = base[: MAX_IDENTIFIER_LENGTH - RANDOM_SUFFIX_LENGTH]
    for _ in range(RANDOM_ATTEMPTS):
        candidate = stem + "".join(secrets.choice(_ALPHABET) for _ in range(RANDOM_SUFFIX_LENGTH))
        if await store.find_by_field("nomad_id", candidate) is None:
            return candidate

    raise DuplicateIdentifierError(f"Could not allocate a unique nomad id for base {base!r}")
