"""Resource CRUD, listing and stats endpoints."""
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user_id
from models.resource import ResourceType
from schemas.resource import (
    ResourceCreate,
    ResourceListResponse,
    ResourceResponse,
    ResourceStatsResponse,
    ResourceUpdate,
)
from schemas.validators import split_tag_params, validate_and_normalize_tags
from services.exceptions import ResourceValidationError
from services.resource_query_service import (
    DEFAULT_PAGE_LIMIT,
    MAX_PAGE_LIMIT,
    ResourceFilter,
    search_resources,
)
from services.resource_service import resource_service
from services.stats_service import get_resource_stats

router = APIRouter(prefix="/resources", tags=["resources"])

UNFILED_SENTINELS = {"root", "null"}


def _parse_folder_filter(folder_id: str | None) -> UUID | Literal["root"] | None:
    """Interpret the folder_id query parameter: an id, 'root'/'null' for unfiled, or absent."""
    if folder_id is None or folder_id == "":
        return None
    if folder_id.lower() in UNFILED_SENTINELS:
        return "root"
    try:
        return UUID(folder_id)
    except ValueError as e:
        raise ResourceValidationError(
            [f"folder_id must be a folder id or 'root' (got '{folder_id}')"],
        ) from e


@router.get("/", response_model=ResourceListResponse)
async def list_resources(
    type: ResourceType | None = Query(default=None, description="Filter by resource type"),  # noqa: A002
    folder_id: str | None = Query(
        default=None,
        description="Folder id, or 'root' for resources not in any folder",
    ),
    favorite: bool | None = Query(default=None, description="Filter by favorite flag"),
    tags: list[str] = Query(
        default=[],
        description="Match resources with any of these tags (repeat or comma-separate)",
    ),
    search: str | None = Query(
        default=None,
        description="Search terms (matches title, annotations, content, description, tags)",
    ),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ResourceListResponse:
    """List resources with filtering, search and pagination."""
    try:
        tag_filter = validate_and_normalize_tags(split_tag_params(tags))
    except ValueError as e:
        raise ResourceValidationError([str(e)]) from e

    filters = ResourceFilter(
        type=type,
        folder_id=_parse_folder_filter(folder_id),
        favorite=favorite,
        tags=tag_filter,
        search=search,
        page=page,
        limit=limit,
    )
    result = await search_resources(db, user_id, filters)
    return ResourceListResponse(
        items=[ResourceResponse.model_validate(item) for item in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        pages=result.pages,
    )


@router.get("/stats", response_model=ResourceStatsResponse)
async def get_stats(
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ResourceStatsResponse:
    """Get per-type and favorite counts for the current user."""
    return await get_resource_stats(db, user_id)


@router.get("/{resource_id}", response_model=ResourceResponse)
async def get_resource(
    resource_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ResourceResponse:
    """Get a single resource by ID."""
    resource = await resource_service.get_or_raise(db, user_id, resource_id)
    return ResourceResponse.model_validate(resource)


@router.post("/", response_model=ResourceResponse, status_code=201)
async def create_resource(
    data: ResourceCreate,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ResourceResponse:
    """Create a resource. The body's `type` selects which payload fields apply."""
    resource = await resource_service.create(db, user_id, data)
    return ResourceResponse.model_validate(resource)


@router.patch("/{resource_id}", response_model=ResourceResponse)
async def update_resource(
    resource_id: UUID,
    data: ResourceUpdate,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ResourceResponse:
    """Update a resource. Only fields present in the body are changed."""
    resource = await resource_service.update(db, user_id, resource_id, data)
    return ResourceResponse.model_validate(resource)


@router.delete("/{resource_id}", status_code=204)
async def delete_resource(
    resource_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> Response:
    """Permanently delete a resource."""
    await resource_service.delete(db, user_id, resource_id)
    return Response(status_code=204)


@router.post("/{resource_id}/favorite", response_model=ResourceResponse)
async def toggle_favorite(
    resource_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ResourceResponse:
    """Flip the favorite flag of a resource."""
    resource = await resource_service.toggle_favorite(db, user_id, resource_id)
    return ResourceResponse.model_validate(resource)
