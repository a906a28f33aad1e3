"""Folder model for the per-user folder hierarchy."""
from uuid import UUID

from sqlalchemy import ForeignKeyConstraint, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, TimestampMixin, UUIDv7Mixin

# Predefined folder colors offered to clients
FOLDER_COLORS = [
    "#3B82F6",  # Blue
    "#10B981",  # Emerald
    "#F59E0B",  # Amber
    "#EF4444",  # Red
    "#8B5CF6",  # Purple
    "#EC4899",  # Pink
    "#06B6D4",  # Cyan
    "#6366F1",  # Indigo
    "#84CC16",  # Lime
    "#F97316",  # Orange
]

DEFAULT_FOLDER_COLOR = FOLDER_COLORS[0]
DEFAULT_FOLDER_ICON = "folder"


class Folder(Base, UUIDv7Mixin, TimestampMixin):
    """
    Folder model - a node in a user's folder forest (adjacency list).

    parent_id is NULL for root-level folders. The composite foreign key on
    (user_id, parent_id) guarantees at write time that a parent exists and is
    owned by the same user.
    """

    __tablename__ = "folders"
    __table_args__ = (
        # Target for the composite (user_id, parent_id) / (user_id, folder_id) foreign keys
        UniqueConstraint("user_id", "id", name="uq_folders_user_id_id"),
        ForeignKeyConstraint(
            ["user_id", "parent_id"],
            ["folders.user_id", "folders.id"],
            name="fk_folders_parent_same_user",
        ),
        # Sibling names are unique; on PostgreSQL root-level siblings (NULL parent)
        # are covered too via NULLS NOT DISTINCT
        Index(
            "uq_folders_user_parent_name",
            "user_id",
            "parent_id",
            "name",
            unique=True,
            postgresql_nulls_not_distinct=True,
        ),
        Index("ix_folders_user_id_parent_id", "user_id", "parent_id"),
    )

    # id provided by UUIDv7Mixin
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    parent_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True, default=None)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str] = mapped_column(String(20), nullable=False, default=DEFAULT_FOLDER_COLOR)
    icon: Mapped[str] = mapped_column(String(50), nullable=False, default=DEFAULT_FOLDER_ICON)
    sort_order: Mapped[int] = mapped_column(nullable=False, default=0)

    @property
    def is_root(self) -> bool:
        """True if the folder sits at the top level of its tree."""
        return self.parent_id is None
