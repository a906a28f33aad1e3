"""Service layer for resource CRUD operations."""
import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from models.base import utc_now
from models.resource import RESOURCE_MODELS, TYPE_SPECIFIC_FIELDS, Resource, ResourceType
from schemas.resource import ResourceCreateBase, ResourceUpdate
from services.exceptions import (
    InvalidOperationError,
    NotFoundError,
    ResourceValidationError,
)
from services.folder_service import FolderService, folder_service
from services.tag_service import get_or_create_tags, update_resource_tags

logger = logging.getLogger(__name__)

REQUIRED_FIELD_LABELS = {
    "url": "URL",
    "content": "Content",
}


class ResourceService:
    """
    Resource service with full CRUD operations.

    Resources are polymorphic: the stored `type` selects the mapped subclass, and
    that subclass declares which payload fields apply and which are required. The
    type is fixed at creation.
    """

    entity_name = "Resource"

    def __init__(self, folders: FolderService = folder_service) -> None:
        self.folders = folders

    async def _refresh_with_relations(self, db: AsyncSession, resource: Resource) -> None:
        """Refresh resource and eagerly load its tags and folder."""
        await db.refresh(resource)
        await db.refresh(resource, attribute_names=["tag_objects", "folder"])

    async def get(
        self,
        db: AsyncSession,
        user_id: UUID,
        resource_id: UUID,
    ) -> Resource | None:
        """
        Get a resource by ID, scoped to user.

        Args:
            db: Database session.
            user_id: User ID to scope the resource.
            resource_id: ID of the resource to retrieve.

        Returns:
            The resource (as its type's subclass) if found, None otherwise.
        """
        result = await db.execute(
            select(Resource)
            .options(selectinload(Resource.tag_objects), selectinload(Resource.folder))
            .where(Resource.id == resource_id, Resource.user_id == user_id),
        )
        return result.scalar_one_or_none()

    async def get_or_raise(
        self,
        db: AsyncSession,
        user_id: UUID,
        resource_id: UUID,
    ) -> Resource:
        """Get a resource by ID, raising NotFoundError if it does not exist for this user."""
        resource = await self.get(db, user_id, resource_id)
        if resource is None:
            raise NotFoundError(self.entity_name)
        return resource

    async def create(
        self,
        db: AsyncSession,
        user_id: UUID,
        data: ResourceCreateBase,
    ) -> Resource:
        """
        Create a new resource for a user.

        Args:
            db: Database session.
            user_id: User ID to create the resource for.
            data: A validated type-specific create schema (BookmarkCreate, NoteCreate, ...).

        Returns:
            The created resource.

        Raises:
            NotFoundError: If folder_id does not resolve to a folder of this user.
        """
        if data.folder_id is not None:
            await self.folders.validate_folder_ref(db, user_id, data.folder_id)

        model = RESOURCE_MODELS[ResourceType(data.type)]
        tag_objects = await get_or_create_tags(db, user_id, data.tags)
        resource = model(
            user_id=user_id,
            title=data.title,
            folder_id=data.folder_id,
            annotations=data.annotations,
            favorite=data.favorite,
            **data.payload(),
        )
        resource.tag_objects = tag_objects
        db.add(resource)
        await self._flush(db)
        await self._refresh_with_relations(db, resource)
        return resource

    async def update(
        self,
        db: AsyncSession,
        user_id: UUID,
        resource_id: UUID,
        data: ResourceUpdate,
    ) -> Resource:
        """
        Update a resource.

        Args:
            db: Database session.
            user_id: User ID to scope the resource.
            resource_id: ID of the resource to update.
            data: Update data; only explicitly set fields are applied.

        Returns:
            The updated resource.

        Raises:
            NotFoundError: If the resource, or a newly referenced folder, does not exist
                for this user.
            InvalidOperationError: If the patch tries to change the resource type.
            ResourceValidationError: If the patch sets fields that do not apply to the
                resource's type, or clears a required field.
        """
        resource = await self.get_or_raise(db, user_id, resource_id)

        update_data = data.model_dump(exclude_unset=True)
        requested_type = update_data.pop("type", None)
        if requested_type is not None and requested_type != resource.type:
            raise InvalidOperationError(
                f"Resource type cannot be changed (is '{resource.type}', "
                f"got '{requested_type}')",
            )

        errors = self._validate_patch(type(resource), resource.type, update_data)
        if errors:
            raise ResourceValidationError(errors)

        if "folder_id" in update_data:
            folder_id = update_data.pop("folder_id")
            if folder_id is not None and folder_id != resource.folder_id:
                await self.folders.validate_folder_ref(db, user_id, folder_id)
            resource.folder_id = folder_id

        new_tags = update_data.pop("tags", None)
        if new_tags is not None:
            await update_resource_tags(db, resource, new_tags)

        for field, value in update_data.items():
            if field in REQUIRED_FIELD_LABELS and isinstance(value, str):
                value = value.strip()
            setattr(resource, field, value)

        resource.updated_at = utc_now()

        await self._flush(db)
        await self._refresh_with_relations(db, resource)
        return resource

    async def delete(
        self,
        db: AsyncSession,
        user_id: UUID,
        resource_id: UUID,
    ) -> None:
        """
        Permanently delete a resource.

        Raises:
            NotFoundError: If the resource does not exist for this user.
        """
        resource = await self.get_or_raise(db, user_id, resource_id)
        await db.delete(resource)
        await db.flush()

    async def toggle_favorite(
        self,
        db: AsyncSession,
        user_id: UUID,
        resource_id: UUID,
    ) -> Resource:
        """
        Flip a resource's favorite flag.

        Returns:
            The updated resource.

        Raises:
            NotFoundError: If the resource does not exist for this user.
        """
        resource = await self.get_or_raise(db, user_id, resource_id)
        resource.favorite = not resource.favorite
        await db.flush()
        await self._refresh_with_relations(db, resource)
        return resource

    # --- Private Helper Methods ---

    @staticmethod
    def _validate_patch(
        model: type[Resource],
        resource_type: str,
        update_data: dict,
    ) -> list[str]:
        """Collect per-field errors for a patch against the stored resource type."""
        errors = [
            f"Field '{field}' does not apply to {resource_type} resources"
            for field in sorted(update_data)
            if field in TYPE_SPECIFIC_FIELDS and field not in model.type_fields
        ]

        if "title" in update_data and update_data["title"] is None:
            errors.append("Title is required")

        for field in sorted(model.required_fields):
            if field not in update_data:
                continue
            value = update_data[field]
            if value is None or (isinstance(value, str) and not value.strip()):
                errors.append(
                    f"{REQUIRED_FIELD_LABELS.get(field, field)} is required for "
                    f"{resource_type} resources",
                )
        return errors

    async def _flush(self, db: AsyncSession) -> None:
        """Flush pending writes; a folder removed concurrently surfaces as NotFound."""
        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            if "fk_resources_folder_same_user" in str(e) or "FOREIGN KEY constraint failed" in str(e):
                logger.warning("Resource write lost a race with a folder delete: %s", e.orig)
                raise NotFoundError("Folder") from e
            raise


resource_service = ResourceService()
