"""Domain entities for GitHub organization repositories."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Tuple


def _format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with a trailing Z, as GitHub writes timestamps."""
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class Owner:
    """Immutable owner value nested in a repository."""

    avatar_url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"avatarUrl": self.avatar_url}


@dataclass(frozen=True)
class RepositoryRecord:
    """Immutable repository entity, identified by its full name."""

    full_name: str
    description: str
    language: str
    created_at: datetime
    owner: Owner

    @property
    def owner_avatar_url(self) -> str:
        return self.owner.avatar_url

    def to_dict(self) -> Dict[str, Any]:
        """Full shape, with the owner kept nested."""
        return {
            "fullName": self.full_name,
            "description": self.description,
            "language": self.language,
            "owner": self.owner.to_dict(),
            "createdAt": _format_timestamp(self.created_at),
        }

    def to_summary(self) -> Dict[str, Any]:
        """Reduced shape with the owner's avatar URL flattened."""
        return {
            "fullName": self.full_name,
            "description": self.description,
            "language": self.language,
            "createdAt": _format_timestamp(self.created_at),
            "ownerAvatarUrl": self.owner_avatar_url,
        }


@dataclass(frozen=True)
class Snapshot:
    """
    Immutable copy of the full record set from one successful fetch.

    Records keep the upstream response order.
    """

    records: Tuple[RepositoryRecord, ...]
    fetched_at: datetime
