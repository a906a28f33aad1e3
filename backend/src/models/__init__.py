"""SQLAlchemy models."""
from models.base import Base, TimestampMixin, UUIDv7Mixin
from models.tag import Tag, resource_tags  # Must be before resource due to import
from models.folder import DEFAULT_FOLDER_COLOR, DEFAULT_FOLDER_ICON, FOLDER_COLORS, Folder
from models.resource import (
    RESOURCE_MODELS,
    TYPE_SPECIFIC_FIELDS,
    Bookmark,
    Document,
    Note,
    Prompt,
    Resource,
    ResourceType,
    Snippet,
)

__all__ = [
    "DEFAULT_FOLDER_COLOR",
    "DEFAULT_FOLDER_ICON",
    "FOLDER_COLORS",
    "RESOURCE_MODELS",
    "TYPE_SPECIFIC_FIELDS",
    "Base",
    "Bookmark",
    "Document",
    "Folder",
    "Note",
    "Prompt",
    "Resource",
    "ResourceType",
    "Snippet",
    "Tag",
    "TimestampMixin",
    "UUIDv7Mixin",
    "resource_tags",
]
