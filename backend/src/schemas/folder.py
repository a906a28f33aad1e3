"""Pydantic schemas for folder endpoints."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from models.folder import DEFAULT_FOLDER_COLOR, DEFAULT_FOLDER_ICON
from schemas.validators import validate_folder_name


class FolderCreate(BaseModel):
    """Schema for creating a new folder."""

    name: str
    parent_id: UUID | None = None
    color: str = Field(default=DEFAULT_FOLDER_COLOR, max_length=20)
    icon: str = Field(default=DEFAULT_FOLDER_ICON, max_length=50)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        """Trim and validate the folder name."""
        return validate_folder_name(v)

    @field_validator("color", "icon", mode="before")
    @classmethod
    def blank_to_default(cls, v: str | None, info: ValidationInfo) -> str:
        """Treat missing or blank display metadata as the default."""
        if v is None or not str(v).strip():
            return DEFAULT_FOLDER_COLOR if info.field_name == "color" else DEFAULT_FOLDER_ICON
        return str(v).strip()


class FolderUpdate(BaseModel):
    """
    Schema for updating an existing folder.

    Only fields that are explicitly set are applied. `parent_id: null` moves the
    folder to the root level; omitting `parent_id` leaves it where it is.
    """

    name: str | None = None
    parent_id: UUID | None = None
    color: str | None = Field(default=None, max_length=20)
    icon: str | None = Field(default=None, max_length=50)
    sort_order: int | None = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str | None) -> str | None:
        """Trim and validate the folder name (if provided)."""
        if v is None:
            return None
        return validate_folder_name(v)


class FolderResponse(BaseModel):
    """Schema for a single folder."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    parent_id: UUID | None
    color: str
    icon: str
    sort_order: int
    created_at: datetime
    updated_at: datetime


class FolderWithCountsResponse(FolderResponse):
    """Folder plus the number of direct child folders and resources it holds."""

    child_count: int = 0
    resource_count: int = 0


class FolderTreeNode(FolderResponse):
    """A folder with its nested children."""

    children: list["FolderTreeNode"] = Field(default_factory=list)


class FolderListResponse(BaseModel):
    """Flat folder listing."""

    folders: list[FolderWithCountsResponse]


class FolderTreeResponse(BaseModel):
    """Nested folder listing: root folders with their descendants."""

    folders: list[FolderTreeNode]


class FolderColorsResponse(BaseModel):
    """The predefined folder color palette."""

    colors: list[str]
