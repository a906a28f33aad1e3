"""
Filtered, paginated and relevance-ranked resource listings.

All filters combine with AND. Search terms combine with OR: a resource matches
when any term occurs in any searchable field, and the relevance score is the
weighted sum of every (term, field) hit.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Literal
from uuid import UUID

from sqlalchemy import ColumnElement, case, exists, func, literal, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute, selectinload

from models.resource import Resource, ResourceType
from models.tag import Tag, resource_tags
from schemas.validators import validate_and_normalize_tags
from services.exceptions import ResourceValidationError
from services.utils import escape_ilike, split_search_terms

DEFAULT_PAGE_LIMIT = 50
MAX_PAGE_LIMIT = 100

TAG_SEARCH_WEIGHT = 0.6

# Full-text search (PostgreSQL only): text search config and per-field tsvector weights
FTS_CONFIG = "english"

RESOURCE_SEARCH_FIELDS: list[tuple[InstrumentedAttribute, float]] = [
    (Resource.title, 0.8),
    (Resource.description, 0.4),
    (Resource.annotations, 0.4),
    (Resource.content, 0.1),
]

FTS_FIELDS: list[tuple[InstrumentedAttribute, str]] = [
    (Resource.title, "A"),
    (Resource.description, "B"),
    (Resource.annotations, "B"),
    (Resource.content, "D"),
]


@dataclass
class ResourceFilter:
    """
    Filter specification for resource listings.

    folder_id is a folder id, the sentinel "root" for unfiled resources, or None
    for no folder restriction.
    """

    type: ResourceType | None = None
    folder_id: UUID | Literal["root"] | None = None
    favorite: bool | None = None
    tags: list[str] = field(default_factory=list)
    search: str | None = None
    page: int = 1
    limit: int = DEFAULT_PAGE_LIMIT


@dataclass
class ResourcePage:
    """One page of a filtered listing plus the size of the whole result."""

    items: list[Resource]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit)


def _tag_exists(user_id: UUID, condition: ColumnElement[bool]) -> ColumnElement[bool]:
    """Correlated EXISTS over the resource's tags restricted by `condition`."""
    subq = (
        select(resource_tags.c.resource_id)
        .join(Tag, resource_tags.c.tag_id == Tag.id)
        .where(
            resource_tags.c.resource_id == Resource.id,
            Tag.user_id == user_id,
            condition,
        )
    )
    return exists(subq)


def _term_hits(user_id: UUID, term: str) -> list[tuple[ColumnElement[bool], float]]:
    """(match condition, weight) for each searchable field for one term."""
    pattern = f"%{escape_ilike(term)}%"
    hits = [
        (column.ilike(pattern, escape="\\"), weight)
        for column, weight in RESOURCE_SEARCH_FIELDS
    ]
    hits.append(
        (_tag_exists(user_id, Tag.name.ilike(pattern, escape="\\")), TAG_SEARCH_WEIGHT),
    )
    return hits


def _search_vector() -> ColumnElement[Any]:
    """Weighted tsvector over the searchable text columns (title ranks highest)."""
    parts = [
        func.setweight(func.to_tsvector(FTS_CONFIG, func.coalesce(column, "")), weight)
        for column, weight in FTS_FIELDS
    ]
    vector = parts[0]
    for part in parts[1:]:
        vector = vector.op("||")(part)
    return vector


def _build_search(
    user_id: UUID,
    search: str | None,
    dialect_name: str = "sqlite",
) -> tuple[ColumnElement[bool] | None, Any]:
    """
    Build the search match clause and relevance score.

    The substring score is the weighted sum of every (term, field) hit and works
    on every backend. On PostgreSQL the full-text rank of the whole query is added
    to it, so whole-word matches outrank matches inside longer words. Full-text
    search only ranks; which rows match is decided by the substring clause alone.

    Returns:
        (clause, score). clause is None when there is nothing to search for, in
        which case score is a constant 0.
    """
    terms = split_search_terms(search or "")
    if not terms:
        return None, literal(0)

    hits = [hit for term in terms for hit in _term_hits(user_id, term)]
    clause = or_(*(condition for condition, _ in hits))
    score = sum(
        (case((condition, weight), else_=0.0) for condition, weight in hits[1:]),
        case((hits[0][0], hits[0][1]), else_=0.0),
    )

    if dialect_name == "postgresql":
        # OR across terms, as on the substring side
        tsquery = func.websearch_to_tsquery(FTS_CONFIG, " or ".join(terms))
        score = score + func.coalesce(func.ts_rank(_search_vector(), tsquery), 0)

    return clause, score


def _build_filters(user_id: UUID, filters: ResourceFilter) -> list[ColumnElement[bool]]:
    """Build the AND-combined WHERE conditions for everything except search."""
    conditions: list[ColumnElement[bool]] = [Resource.user_id == user_id]

    if filters.type is not None:
        conditions.append(Resource.type == filters.type.value)

    if filters.folder_id == "root":
        conditions.append(Resource.folder_id.is_(None))
    elif filters.folder_id is not None:
        conditions.append(Resource.folder_id == filters.folder_id)

    if filters.favorite is not None:
        conditions.append(Resource.favorite == filters.favorite)

    tags = validate_and_normalize_tags(filters.tags)
    if tags:
        conditions.append(_tag_exists(user_id, Tag.name.in_(tags)))

    return conditions


def _check_pagination(page: int, limit: int) -> None:
    errors = []
    if page < 1:
        errors.append("page must be at least 1")
    if not 1 <= limit <= MAX_PAGE_LIMIT:
        errors.append(f"limit must be between 1 and {MAX_PAGE_LIMIT}")
    if errors:
        raise ResourceValidationError(errors)


async def search_resources(
    db: AsyncSession,
    user_id: UUID,
    filters: ResourceFilter,
) -> ResourcePage:
    """
    Return one page of the user's resources matching `filters`.

    Without a search term results are ordered newest first; with one they are
    ordered by relevance, then newest first. `total` is counted from the same
    filtered statement the page is sliced from.

    Raises:
        ResourceValidationError: If page or limit is out of range.
    """
    _check_pagination(filters.page, filters.limit)

    conditions = _build_filters(user_id, filters)
    search_clause, score = _build_search(
        user_id, filters.search, db.get_bind().dialect.name,
    )
    if search_clause is not None:
        conditions.append(search_clause)

    base_query = select(Resource).where(*conditions)

    count_result = await db.execute(
        select(func.count()).select_from(base_query.subquery()),
    )
    total = count_result.scalar_one()

    order_by: list[Any] = [Resource.created_at.desc(), Resource.id.desc()]
    if search_clause is not None:
        order_by.insert(0, score.desc())

    result = await db.execute(
        base_query
        .options(selectinload(Resource.tag_objects), selectinload(Resource.folder))
        .order_by(*order_by)
        .offset((filters.page - 1) * filters.limit)
        .limit(filters.limit),
    )
    items = list(result.scalars().unique())

    return ResourcePage(items=items, total=total, page=filters.page, limit=filters.limit)
