from abc import ABC, abstractmethod

from nomada.models.profile import ProfileRecord

LOOKUP_FIELDS = frozenset({"id", "email", "nomad_id", "username"})


class ProfileStore(ABC):
    """Keyed profile persistence with unique email, nomad id and username.

    Implementations raise ``ProfileConflictError`` naming the violated field on
    uniqueness conflicts and ``ProfileStoreError`` for any other failure.
    """

    @abstractmethod
    async def find_by_field(self, field: str, value: str) -> ProfileRecord | None: ...

    @abstractmethod
    async def insert(self, record: ProfileRecord) -> ProfileRecord: ...

    async def close(self) -> None:
        return None
