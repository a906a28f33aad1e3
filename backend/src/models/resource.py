"""Resource model: one table, one mapped subclass per resource type."""
from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar, Optional
from uuid import UUID

from sqlalchemy import (
    BigInteger,
    Boolean,
    ForeignKeyConstraint,
    Index,
    String,
    Text,
    Uuid,
    false,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin, UUIDv7Mixin
from models.tag import resource_tags

if TYPE_CHECKING:
    from models.folder import Folder
    from models.tag import Tag


class ResourceType(StrEnum):
    """Closed set of resource types. Fixed at creation."""

    BOOKMARK = "bookmark"
    PROMPT = "prompt"
    SNIPPET = "snippet"
    DOCUMENT = "document"
    NOTE = "note"


class Resource(Base, UUIDv7Mixin, TimestampMixin):
    """
    Resource model - base of the polymorphic resource hierarchy.

    Uses single-table inheritance keyed on `type`: loading a row always yields the
    subclass for its type (Bookmark, Prompt, ...). Type-specific columns live on the
    shared table and are nullable; each subclass declares which of them it uses
    (`type_fields`) and which it requires (`required_fields`).
    """

    __tablename__ = "resources"
    __table_args__ = (
        # Folder must exist and be owned by the same user
        ForeignKeyConstraint(
            ["user_id", "folder_id"],
            ["folders.user_id", "folders.id"],
            name="fk_resources_folder_same_user",
        ),
        Index("ix_resources_user_id_type", "user_id", "type"),
        Index("ix_resources_user_id_folder_id", "user_id", "folder_id"),
    )
    __mapper_args__ = {"polymorphic_on": "type"}

    # Fields this type may carry beyond the shared ones; overridden per subclass
    type_fields: ClassVar[frozenset[str]] = frozenset()
    # Fields that must be non-empty for this type
    required_fields: ClassVar[frozenset[str]] = frozenset()

    # id provided by UUIDv7Mixin
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    folder_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True, default=None)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    annotations: Mapped[str | None] = mapped_column(Text, nullable=True)
    favorite: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false(), index=True,
    )

    # Shared payload columns
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)

    # bookmark
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    favicon: Mapped[str | None] = mapped_column(Text, nullable=True)
    # prompt
    platform: Mapped[str | None] = mapped_column(String(50), nullable=True)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # snippet
    code_language: Mapped[str | None] = mapped_column(String(30), nullable=True)
    # document (file transfer itself is handled by the blob storage provider)
    file_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    file_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    file_size: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    file_type: Mapped[str | None] = mapped_column(String(255), nullable=True)

    tag_objects: Mapped[list["Tag"]] = relationship(
        secondary=resource_tags,
        back_populates="resources",
        order_by="Tag.name",
    )
    # Read-only view of the containing folder; folder_id is the column that is written
    folder: Mapped[Optional["Folder"]] = relationship(
        primaryjoin="foreign(Resource.folder_id) == Folder.id",
        viewonly=True,
    )

    @property
    def tags(self) -> list[str]:
        """Tag names, if the relationship is loaded."""
        loaded = self.__dict__.get("tag_objects")
        if loaded is None:
            return []
        return [tag.name for tag in loaded]


class Bookmark(Resource):
    """A saved URL."""

    __mapper_args__ = {"polymorphic_identity": ResourceType.BOOKMARK.value}

    type_fields = frozenset({"url", "favicon", "description"})
    required_fields = frozenset({"url"})


class Prompt(Resource):
    """An AI prompt, optionally labelled with the platform and category it targets."""

    __mapper_args__ = {"polymorphic_identity": ResourceType.PROMPT.value}

    type_fields = frozenset({"content", "platform", "category"})
    required_fields = frozenset({"content"})


class Snippet(Resource):
    """A code snippet."""

    __mapper_args__ = {"polymorphic_identity": ResourceType.SNIPPET.value}

    type_fields = frozenset({"content", "code_language", "description"})
    required_fields = frozenset({"content"})


class Document(Resource):
    """A reference to a file held by the blob storage provider."""

    __mapper_args__ = {"polymorphic_identity": ResourceType.DOCUMENT.value}

    type_fields = frozenset({"file_url", "file_name", "file_size", "file_type", "description"})
    required_fields = frozenset()


class Note(Resource):
    """A free-form note."""

    __mapper_args__ = {"polymorphic_identity": ResourceType.NOTE.value}

    type_fields = frozenset({"content"})
    required_fields = frozenset({"content"})


RESOURCE_MODELS: dict[ResourceType, type[Resource]] = {
    ResourceType.BOOKMARK: Bookmark,
    ResourceType.PROMPT: Prompt,
    ResourceType.SNIPPET: Snippet,
    ResourceType.DOCUMENT: Document,
    ResourceType.NOTE: Note,
}

# Columns that belong to some type's payload (the union of all type_fields)
TYPE_SPECIFIC_FIELDS: frozenset[str] = frozenset().union(
    *(model.type_fields for model in RESOURCE_MODELS.values()),
)
