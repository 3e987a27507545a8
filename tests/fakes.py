"""In-memory stand-ins for the profile repository and storage backend."""

from src.models.profile import Profile, ProfileSummary, ProfileUpdate
from src.repositories.profile_repository import RepositoryConflictError
from src.storage import StorageError

SUMMARY_KEYS = ("id", "username", "first_name", "last_name", "avatar_url")


class FakeProfileRepository:
    """In-memory profile repository with the same uniqueness rules as the table."""

    def __init__(self) -> None:
        self.rows: dict[str, Profile] = {}

    def _summary(self, row: Profile) -> ProfileSummary:
        return {key: row[key] for key in SUMMARY_KEYS}  # type: ignore[return-value]

    def _username_taken(self, username: str, profile_id: str) -> bool:
        return any(row["username"] == username and row["id"] != profile_id for row in self.rows.values())

    async def find_by_id(self, profile_id: str) -> Profile | None:
        row = self.rows.get(profile_id)
        return dict(row) if row else None  # type: ignore[return-value]

    async def find_by_username(self, username: str) -> Profile | None:
        for row in self.rows.values():
            if row["username"] == username:
                return dict(row)  # type: ignore[return-value]
        return None

    async def find_many(self, profile_ids: list[str]) -> list[ProfileSummary]:
        return [self._summary(self.rows[i]) for i in profile_ids if i in self.rows]

    async def search(self, query: str, limit: int) -> list[ProfileSummary]:
        needle = query.lower()
        matches = [
            self._summary(row)
            for row in self.rows.values()
            if any(needle in (row[key] or "").lower() for key in ("username", "first_name", "last_name"))
        ]
        return matches[:limit]

    async def create(self, profile: Profile) -> Profile:
        if profile["id"] in self.rows or self._username_taken(profile["username"], profile["id"]):
            raise RepositoryConflictError("duplicate key")
        self.rows[profile["id"]] = dict(profile)  # type: ignore[assignment]
        return dict(profile)  # type: ignore[return-value]

    async def update(self, profile_id: str, fields: ProfileUpdate) -> Profile | None:
        row = self.rows.get(profile_id)
        if row is None:
            return None
        if "username" in fields and self._username_taken(fields["username"], profile_id):
            raise RepositoryConflictError("duplicate key")
        row.update(fields)
        return dict(row)  # type: ignore[return-value]


class FakeStorage:
    """Storage backend that keeps blobs in a dict and records deletions."""

    name = "fake"

    def __init__(self) -> None:
        self.blobs: dict[str, tuple[bytes, str]] = {}
        self.deleted: list[str] = []
        self.fail_put = False
        self.fail_delete = False
        self._counter = 0

    def put(self, data: bytes, filename: str, content_type: str) -> str:
        if self.fail_put:
            raise StorageError("put failed")
        self._counter += 1
        url = f"memory://avatars/{self._counter}-{filename}"
        self.blobs[url] = (data, content_type)
        return url

    def delete(self, url: str) -> None:
        if self.fail_delete:
            raise StorageError("delete failed")
        self.blobs.pop(url, None)
        self.deleted.append(url)

    def check(self) -> None:
        return None


