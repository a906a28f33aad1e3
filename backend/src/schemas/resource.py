"""
Pydantic schemas for resource endpoints.

Resource creation is a tagged union keyed on `type`: each resource type has its own
create schema carrying only its own payload fields, so a bookmark without a `url` or
a note without `content` cannot be constructed.
"""
from datetime import datetime
from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)

from models.resource import ResourceType
from schemas.validators import (
    coerce_tag_input,
    normalize_folder_ref,
    validate_and_normalize_tags,
    validate_annotations_length,
    validate_content_length,
    validate_description_length,
    validate_title,
)


def _check_required_text(label: str, v: Any) -> Any:
    """Trim a required text payload field and reject blank values."""
    if not isinstance(v, str) and v is not None:
        return v  # left to the str type check
    if v is None or not v.strip():
        raise ValueError(f"{label} is required")
    return v.strip()


class ResourceCreateBase(BaseModel):
    """Fields shared by every resource type."""

    model_config = ConfigDict(extra="forbid")

    title: str
    folder_id: UUID | None = None
    tags: list[str] = []
    annotations: str | None = None
    favorite: bool = False

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str) -> str:
        """Validate title is present and within limits."""
        return validate_title(v)

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v: Any) -> list[str]:
        """Normalize and validate tags; a single string is split on commas."""
        if v is None:
            return []
        return validate_and_normalize_tags(coerce_tag_input(v))

    @field_validator("folder_id", mode="before")
    @classmethod
    def empty_folder_is_unfiled(cls, v: Any) -> Any:
        """Treat an empty folder id as unfiled."""
        return normalize_folder_ref(v)

    @field_validator("annotations")
    @classmethod
    def check_annotations_length(cls, v: str | None) -> str | None:
        """Validate annotations length."""
        return validate_annotations_length(v)

    def payload(self) -> dict[str, Any]:
        """Type-specific fields of this variant, excluding shared fields and `type`."""
        shared = set(ResourceCreateBase.model_fields) | {"type"}
        return self.model_dump(exclude=shared)


class BookmarkCreate(ResourceCreateBase):
    """Schema for creating a bookmark."""

    type: Literal["bookmark"]
    url: str
    description: str | None = None
    favicon: str | None = None

    @field_validator("url", mode="before")
    @classmethod
    def check_url(cls, v: str | None) -> str:
        """URL is required for bookmarks."""
        return _check_required_text("URL", v)

    @field_validator("description")
    @classmethod
    def check_description_length(cls, v: str | None) -> str | None:
        """Validate description length."""
        return validate_description_length(v)


class PromptCreate(ResourceCreateBase):
    """Schema for creating an AI prompt."""

    type: Literal["prompt"]
    content: str
    platform: str | None = Field(default=None, max_length=50)
    category: str | None = Field(default=None, max_length=50)

    @field_validator("content", mode="before")
    @classmethod
    def check_content(cls, v: str | None) -> str:
        """Content is required for prompts."""
        v = _check_required_text("Content", v)
        return validate_content_length(v) if isinstance(v, str) else v


class SnippetCreate(ResourceCreateBase):
    """Schema for creating a code snippet."""

    type: Literal["snippet"]
    content: str
    code_language: str | None = Field(default=None, max_length=30)
    description: str | None = None

    @field_validator("content", mode="before")
    @classmethod
    def check_content(cls, v: str | None) -> str:
        """Content is required for snippets."""
        v = _check_required_text("Content", v)
        return validate_content_length(v) if isinstance(v, str) else v

    @field_validator("code_language")
    @classmethod
    def lowercase_language(cls, v: str | None) -> str | None:
        """Store languages lowercased ('Python' -> 'python')."""
        return v.strip().lower() if v else v

    @field_validator("description")
    @classmethod
    def check_description_length(cls, v: str | None) -> str | None:
        """Validate description length."""
        return validate_description_length(v)


class DocumentCreate(ResourceCreateBase):
    """
    Schema for creating a document.

    File fields are opaque strings handed over by the blob storage provider;
    the file bytes never pass through this service.
    """

    type: Literal["document"]
    file_url: str | None = None
    file_name: str | None = Field(default=None, max_length=255)
    file_size: int | None = Field(default=None, ge=0)
    file_type: str | None = Field(default=None, max_length=255)
    description: str | None = None

    @field_validator("description")
    @classmethod
    def check_description_length(cls, v: str | None) -> str | None:
        """Validate description length."""
        return validate_description_length(v)


class NoteCreate(ResourceCreateBase):
    """Schema for creating a note."""

    type: Literal["note"]
    content: str

    @field_validator("content", mode="before")
    @classmethod
    def check_content(cls, v: str | None) -> str:
        """Content is required for notes."""
        v = _check_required_text("Content", v)
        return validate_content_length(v) if isinstance(v, str) else v


ResourceCreate = Annotated[
    BookmarkCreate | PromptCreate | SnippetCreate | DocumentCreate | NoteCreate,
    Field(discriminator="type"),
]

resource_create_adapter = TypeAdapter(ResourceCreate)


class ResourceUpdate(BaseModel):
    """
    Schema for updating an existing resource.

    Any subset of mutable fields may be sent. Whether a type-specific field applies
    to the stored resource is checked by the service, which knows the stored type.
    `type` is accepted only so that an attempt to change it can be rejected
    explicitly rather than silently ignored.
    """

    model_config = ConfigDict(extra="forbid")

    type: ResourceType | None = None
    title: str | None = None
    folder_id: UUID | None = None
    tags: list[str] | None = None
    annotations: str | None = None
    favorite: bool | None = None

    description: str | None = None
    content: str | None = None
    url: str | None = None
    favicon: str | None = None
    platform: str | None = Field(default=None, max_length=50)
    category: str | None = Field(default=None, max_length=50)
    code_language: str | None = Field(default=None, max_length=30)
    file_url: str | None = None
    file_name: str | None = Field(default=None, max_length=255)
    file_size: int | None = Field(default=None, ge=0)
    file_type: str | None = Field(default=None, max_length=255)

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str | None) -> str | None:
        """Validate title (if provided)."""
        if v is None:
            return None
        return validate_title(v)

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v: Any) -> list[str] | None:
        """Normalize and validate tags if provided."""
        if v is None:
            return None
        return validate_and_normalize_tags(coerce_tag_input(v))

    @field_validator("folder_id", mode="before")
    @classmethod
    def empty_folder_is_unfiled(cls, v: Any) -> Any:
        """An empty folder id unfiles the resource."""
        return normalize_folder_ref(v)

    @field_validator("annotations")
    @classmethod
    def check_annotations_length(cls, v: str | None) -> str | None:
        """Validate annotations length."""
        return validate_annotations_length(v)

    @field_validator("description")
    @classmethod
    def check_description_length(cls, v: str | None) -> str | None:
        """Validate description length."""
        return validate_description_length(v)

    @field_validator("content")
    @classmethod
    def check_content_length(cls, v: str | None) -> str | None:
        """Validate content length."""
        return validate_content_length(v)

    @field_validator("code_language")
    @classmethod
    def lowercase_language(cls, v: str | None) -> str | None:
        """Store languages lowercased."""
        return v.strip().lower() if v else v

    @model_validator(mode="after")
    def check_favorite_not_null(self) -> "ResourceUpdate":
        """`favorite` may be omitted but not set to null."""
        if "favorite" in self.model_fields_set and self.favorite is None:
            raise ValueError("favorite cannot be null")
        return self


class ResourceFolder(BaseModel):
    """The containing folder as shown alongside a resource."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    color: str


class ResourceResponse(BaseModel):
    """
    Schema for a resource.

    Every type-specific field is present; fields that do not apply to the
    resource's type are null. `folder` carries the containing folder's name and
    color, or null when the resource is unfiled.
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    type: ResourceType
    title: str
    folder_id: UUID | None
    folder: ResourceFolder | None = None
    tags: list[str]
    annotations: str | None
    favorite: bool
    created_at: datetime
    updated_at: datetime

    description: str | None = None
    content: str | None = None
    url: str | None = None
    favicon: str | None = None
    platform: str | None = None
    category: str | None = None
    code_language: str | None = None
    file_url: str | None = None
    file_name: str | None = None
    file_size: int | None = None
    file_type: str | None = None


class ResourceListResponse(BaseModel):
    """Schema for paginated resource listings."""

    items: list[ResourceResponse]
    total: int  # Total count of resources matching the filter (before pagination)
    page: int  # Current page (1-indexed)
    limit: int  # Page size
    pages: int  # ceil(total / limit)


class ResourceStatsResponse(BaseModel):
    """Per-type resource counts for the current user."""

    counts: dict[ResourceType, int]
    total: int
    favorites: int
