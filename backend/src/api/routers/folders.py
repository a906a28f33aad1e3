"""Folder hierarchy endpoints."""
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user_id
from models.folder import FOLDER_COLORS
from schemas.folder import (
    FolderColorsResponse,
    FolderCreate,
    FolderListResponse,
    FolderResponse,
    FolderTreeResponse,
    FolderUpdate,
    FolderWithCountsResponse,
)
from services.folder_service import folder_service

router = APIRouter(prefix="/folders", tags=["folders"])


@router.get("/", response_model=FolderListResponse | FolderTreeResponse)
async def list_folders(
    tree: bool = Query(
        default=False,
        description="Return folders nested under their parents instead of a flat list",
    ),
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> FolderListResponse | FolderTreeResponse:
    """List the current user's folders, flat (with counts) or as a tree."""
    if tree:
        return FolderTreeResponse(folders=await folder_service.list_tree(db, user_id))
    return FolderListResponse(folders=await folder_service.list_folders(db, user_id))


@router.get("/colors", response_model=FolderColorsResponse)
async def get_folder_colors() -> FolderColorsResponse:
    """Get the predefined folder color palette."""
    return FolderColorsResponse(colors=list(FOLDER_COLORS))


@router.get("/{folder_id}", response_model=FolderWithCountsResponse)
async def get_folder(
    folder_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> FolderWithCountsResponse:
    """Get a single folder with its child and resource counts."""
    return await folder_service.get_with_counts(db, user_id, folder_id)


@router.post("/", response_model=FolderResponse, status_code=201)
async def create_folder(
    data: FolderCreate,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> FolderResponse:
    """Create a new folder, at the root or under an existing folder."""
    folder = await folder_service.create(db, user_id, data)
    return FolderResponse.model_validate(folder)


@router.patch("/{folder_id}", response_model=FolderResponse)
async def update_folder(
    folder_id: UUID,
    data: FolderUpdate,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> FolderResponse:
    """
    Update a folder.

    Changing `parent_id` moves the folder (null moves it to the root); changing
    `name` renames it. Both re-check sibling name uniqueness.
    """
    folder = await folder_service.update(db, user_id, folder_id, data)
    return FolderResponse.model_validate(folder)


@router.delete("/{folder_id}", response_model=FolderResponse)
async def delete_folder(
    folder_id: UUID,
    force: bool = Query(
        default=False,
        description="Move contents up to the parent folder and delete a non-empty folder",
    ),
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> FolderResponse:
    """Delete a folder, returning it as it was before deletion."""
    folder = await folder_service.delete(db, user_id, folder_id, force=force)
    return FolderResponse.model_validate(folder)
