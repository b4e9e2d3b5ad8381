"""Filtering, sorting, limiting and projection over cached repositories."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from repo_lister.domain.repository import RepositoryRecord


@dataclass(frozen=True)
class RepositoryQuery:
    """Parameters of the filtered repository view. Every field is optional."""

    language: Optional[str] = None
    name: Optional[str] = None
    sort_order: Optional[str] = "asc"
    limit: Optional[int] = None


def filter_by_language(records: Sequence[RepositoryRecord], language: Optional[str]) -> List[RepositoryRecord]:
    """Keep repositories whose language equals `language`, ignoring case."""
    if not language:
        return list(records)
    wanted = language.casefold()
    return [repo for repo in records if repo.language.casefold() == wanted]


def filter_by_name(records: Sequence[RepositoryRecord], name_part: Optional[str]) -> List[RepositoryRecord]:
    """Keep repositories whose full name contains `name_part`, ignoring case."""
    if not name_part:
        return list(records)
    wanted = name_part.casefold()
    return [repo for repo in records if wanted in repo.full_name.casefold()]


def sort_by_created_at(records: Sequence[RepositoryRecord], order: Optional[str]) -> List[RepositoryRecord]:
    """
    Sort by creation time, ascending unless `order` is "desc" (any case).

    Repositories created at the same instant keep their input order in
    both directions.
    """
    descending = order is not None and order.lower() == "desc"
    # sorted(reverse=True) is stable too: ties keep input order
    return sorted(records, key=lambda repo: repo.created_at, reverse=descending)


def limit_records(records: Sequence[RepositoryRecord], limit: Optional[int]) -> List[RepositoryRecord]:
    """Keep the first `limit` repositories; a missing or non-positive limit keeps all."""
    if limit is None or limit <= 0:
        return list(records)
    return list(records[:limit])


def project(records: Sequence[RepositoryRecord]) -> List[Dict[str, Any]]:
    return [repo.to_summary() for repo in records]


def apply_query(records: Sequence[RepositoryRecord], query: RepositoryQuery) -> List[Dict[str, Any]]:
    """Run the filtered view: language, name, sort, limit, then project."""
    selected = filter_by_language(records, query.language)
    selected = filter_by_name(selected, query.name)
    selected = sort_by_created_at(selected, query.sort_order)
    selected = limit_records(selected, query.limit)
    return project(selected)
