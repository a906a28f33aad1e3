"""
Service layer for folder tree operations.

Folders form a per-user forest linked by parent_id. Every mutation re-checks the
tree invariants (no cycles, same-owner parent, unique sibling names) against the
user's folders as they are at the time of the call; the storage constraints on
the folders table back the same rules at write time.
"""
import logging
from collections.abc import AsyncIterator
from uuid import UUID

from sqlalchemy import ColumnElement, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.folder import Folder
from models.resource import Resource
from schemas.folder import (
    FolderCreate,
    FolderTreeNode,
    FolderUpdate,
    FolderWithCountsResponse,
)
from services.exceptions import (
    ConflictError,
    FolderNotEmptyError,
    InvalidOperationError,
    NotFoundError,
)
from services.folder_tree import build_tree, would_create_cycle

logger = logging.getLogger(__name__)

SIBLING_NAME_CONSTRAINT = "uq_folders_user_parent_name"


def _raise_for_integrity_error(e: IntegrityError) -> None:
    """
    Translate a constraint violation from a lost write race into a service error.

    Re-raises the original error if it is not one of the folder constraints.
    """
    message = str(e.orig) if e.orig is not None else str(e)
    if SIBLING_NAME_CONSTRAINT in message or "UNIQUE constraint failed: folders." in message:
        raise ConflictError() from e
    if "fk_folders_parent_same_user" in message or "FOREIGN KEY constraint failed" in message:
        raise NotFoundError("Parent folder") from e
    raise e


def _parent_clause(parent_id: UUID | None) -> ColumnElement[bool]:
    return Folder.parent_id.is_(None) if parent_id is None else Folder.parent_id == parent_id


class FolderService:
    """
    Folder service: create, rename, move, delete and list a user's folders.

    All methods take the owning user id explicitly; a folder owned by someone else
    is indistinguishable from a missing one.
    """

    # --- Lookups ---

    async def get(
        self,
        db: AsyncSession,
        user_id: UUID,
        folder_id: UUID,
        for_update: bool = False,
    ) -> Folder | None:
        """
        Get a folder by ID, scoped to user.

        Args:
            db: Database session.
            user_id: User ID to scope the folder.
            folder_id: ID of the folder to retrieve.
            for_update: Lock the row for the rest of the transaction.

        Returns:
            The folder if found, None otherwise.
        """
        query = select(Folder).where(Folder.id == folder_id, Folder.user_id == user_id)
        if for_update:
            query = query.with_for_update()
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def validate_folder_ref(
        self,
        db: AsyncSession,
        user_id: UUID,
        folder_id: UUID,
        entity_name: str = "Folder",
    ) -> Folder:
        """
        Confirm that `folder_id` exists and belongs to `user_id`.

        Used by the resource store before filing a resource into a folder.

        Raises:
            NotFoundError: If the folder is missing or owned by another user.
        """
        folder = await self.get(db, user_id, folder_id)
        if folder is None:
            raise NotFoundError(entity_name)
        return folder

    async def get_with_counts(
        self,
        db: AsyncSession,
        user_id: UUID,
        folder_id: UUID,
    ) -> FolderWithCountsResponse:
        """
        Get a folder with its direct child folder and resource counts.

        Raises:
            NotFoundError: If the folder does not exist for this user.
        """
        folder = await self.validate_folder_ref(db, user_id, folder_id)
        child_count, resource_count = await self._content_counts(db, user_id, folder.id)
        return FolderWithCountsResponse.model_validate(folder).model_copy(
            update={"child_count": child_count, "resource_count": resource_count},
        )

    async def list_folders(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> list[FolderWithCountsResponse]:
        """
        List all folders for a user as a flat sequence.

        Ordered by parent_id, then sort_order, then name (NULL parents, i.e. roots,
        first). Each entry carries its direct child and resource counts.
        """
        child = Folder.__table__.alias("child")
        child_counts = (
            select(child.c.parent_id, func.count().label("child_count"))
            .where(child.c.user_id == user_id, child.c.parent_id.is_not(None))
            .group_by(child.c.parent_id)
            .subquery()
        )
        resource_counts = (
            select(Resource.folder_id, func.count().label("resource_count"))
            .where(Resource.user_id == user_id, Resource.folder_id.is_not(None))
            .group_by(Resource.folder_id)
            .subquery()
        )
        result = await db.execute(
            select(
                Folder,
                func.coalesce(child_counts.c.child_count, 0),
                func.coalesce(resource_counts.c.resource_count, 0),
            )
            .outerjoin(child_counts, child_counts.c.parent_id == Folder.id)
            .outerjoin(resource_counts, resource_counts.c.folder_id == Folder.id)
            .where(Folder.user_id == user_id)
            .order_by(
                Folder.parent_id.is_not(None),
                Folder.parent_id,
                Folder.sort_order,
                Folder.name,
            ),
        )
        return [
            FolderWithCountsResponse.model_validate(folder).model_copy(
                update={"child_count": child_count, "resource_count": resource_count},
            )
            for folder, child_count, resource_count in result.all()
        ]

    async def list_tree(self, db: AsyncSession, user_id: UUID) -> list[FolderTreeNode]:
        """
        List a user's folders as nested trees.

        Loads every folder in one query ordered by sort_order then name, then builds
        the hierarchy in memory in two passes.
        """
        result = await db.execute(
            select(Folder)
            .where(Folder.user_id == user_id)
            .order_by(Folder.sort_order, Folder.name, Folder.id),
        )
        return build_tree(result.scalars().all())

    async def iter_descendant_ids(
        self,
        db: AsyncSession,
        user_id: UUID,
        folder_id: UUID,
    ) -> AsyncIterator[UUID]:
        """
        Lazily yield the ids of all transitive children of a folder, breadth-first.

        Issues one query per tree level, so a caller that stops early does not pay
        for the rest of the subtree.
        """
        seen = {folder_id}
        frontier = [folder_id]
        while frontier:
            result = await db.execute(
                select(Folder.id)
                .where(Folder.user_id == user_id, Folder.parent_id.in_(frontier))
                .order_by(Folder.sort_order, Folder.name),
            )
            next_frontier = []
            for child_id in result.scalars():
                if child_id in seen:
                    continue
                seen.add(child_id)
                next_frontier.append(child_id)
                yield child_id
            frontier = next_frontier

    async def descendant_ids(
        self,
        db: AsyncSession,
        user_id: UUID,
        folder_id: UUID,
    ) -> list[UUID]:
        """Collect all descendant ids of a folder (breadth-first order)."""
        return [child_id async for child_id in self.iter_descendant_ids(db, user_id, folder_id)]

    # --- Mutations ---

    async def create(
        self,
        db: AsyncSession,
        user_id: UUID,
        data: FolderCreate,
    ) -> Folder:
        """
        Create a new folder.

        Args:
            db: Database session.
            user_id: Owner of the new folder.
            data: Folder creation data.

        Returns:
            The created folder.

        Raises:
            NotFoundError: If parent_id does not resolve to a folder of this user.
            ConflictError: If a sibling already has this name.
        """
        if data.parent_id is not None:
            parent = await self.get(db, user_id, data.parent_id, for_update=True)
            if parent is None:
                raise NotFoundError("Parent folder")

        await self._check_sibling_name(db, user_id, data.parent_id, data.name)

        folder = Folder(
            user_id=user_id,
            parent_id=data.parent_id,
            name=data.name,
            color=data.color,
            icon=data.icon,
        )
        db.add(folder)
        await self._flush(db)
        await db.refresh(folder)
        return folder

    async def rename(
        self,
        db: AsyncSession,
        user_id: UUID,
        folder_id: UUID,
        new_name: str,
    ) -> Folder:
        """
        Rename a folder.

        Raises:
            NotFoundError: If the folder does not exist for this user.
            ConflictError: If a sibling already has the new name.
        """
        folder = await self.get(db, user_id, folder_id, for_update=True)
        if folder is None:
            raise NotFoundError("Folder")
        await self._apply_rename(db, user_id, folder, new_name)
        await self._flush(db)
        await db.refresh(folder)
        return folder

    async def move(
        self,
        db: AsyncSession,
        user_id: UUID,
        folder_id: UUID,
        new_parent_id: UUID | None,
    ) -> Folder:
        """
        Move a folder under a new parent (or to the root level when None).

        Raises:
            NotFoundError: If the folder or the new parent does not exist for this user.
            InvalidOperationError: If the new parent is the folder itself or one of its
                descendants.
            ConflictError: If the new parent already has a child with this name.
        """
        folder = await self.get(db, user_id, folder_id, for_update=True)
        if folder is None:
            raise NotFoundError("Folder")
        await self._apply_move(db, user_id, folder, new_parent_id)
        await self._flush(db)
        await db.refresh(folder)
        return folder

    async def update(
        self,
        db: AsyncSession,
        user_id: UUID,
        folder_id: UUID,
        data: FolderUpdate,
    ) -> Folder:
        """
        Apply a partial update: move, rename and display metadata in one call.

        Only fields explicitly set on `data` are applied. When both the parent and
        the name change, the new name is checked once against the destination's
        children.

        Raises:
            NotFoundError, InvalidOperationError, ConflictError: As for move/rename.
        """
        folder = await self.get(db, user_id, folder_id, for_update=True)
        if folder is None:
            raise NotFoundError("Folder")

        update_data = data.model_dump(exclude_unset=True)
        new_name = update_data.pop("name", None)

        moved = False
        if "parent_id" in update_data:
            moved = await self._apply_move(
                db, user_id, folder, update_data.pop("parent_id"), name=new_name,
            )
        if new_name is not None:
            if moved:
                folder.name = new_name
            else:
                await self._apply_rename(db, user_id, folder, new_name)

        for field, value in update_data.items():
            if value is not None:
                setattr(folder, field, value)

        await self._flush(db)
        await db.refresh(folder)
        return folder

    async def delete(
        self,
        db: AsyncSession,
        user_id: UUID,
        folder_id: UUID,
        force: bool = False,
    ) -> Folder:
        """
        Delete a folder.

        An empty folder (no resources, no child folders) is removed directly. A
        non-empty folder is removed only with `force`: its resources and child
        folders are first moved up one level to the folder's own parent, then the
        folder itself is deleted. Descendants below the direct children keep their
        parents, so nothing is orphaned or deleted along with it.

        Returns:
            The deleted folder.

        Raises:
            NotFoundError: If the folder does not exist for this user.
            FolderNotEmptyError: If the folder has contents and force is False.
        """
        folder = await self.get(db, user_id, folder_id, for_update=True)
        if folder is None:
            raise NotFoundError("Folder")

        child_count, resource_count = await self._content_counts(db, user_id, folder.id)
        is_empty = child_count == 0 and resource_count == 0

        if not is_empty and not force:
            raise FolderNotEmptyError()

        if child_count:
            await self._check_reparent_names(db, user_id, folder)

        if not is_empty:
            # Reparent before deleting so no row ever references a removed folder
            await db.execute(
                update(Resource)
                .where(Resource.user_id == user_id, Resource.folder_id == folder.id)
                .values(folder_id=folder.parent_id)
                .execution_options(synchronize_session="fetch"),
            )
            await db.execute(
                update(Folder)
                .where(Folder.user_id == user_id, Folder.parent_id == folder.id)
                .values(parent_id=folder.parent_id)
                .execution_options(synchronize_session="fetch"),
            )
            logger.info(
                "Force-deleting folder %s: moved %d resource(s) and %d folder(s) to %s",
                folder.id, resource_count, child_count, folder.parent_id or "root",
            )

        await db.delete(folder)
        await self._flush(db)
        return folder

    # --- Private Helper Methods ---

    async def _apply_rename(
        self,
        db: AsyncSession,
        user_id: UUID,
        folder: Folder,
        new_name: str,
    ) -> None:
        """Rename in memory after checking the name against current siblings."""
        if new_name == folder.name:
            return
        await self._check_sibling_name(
            db, user_id, folder.parent_id, new_name, exclude_id=folder.id,
        )
        folder.name = new_name

    async def _apply_move(
        self,
        db: AsyncSession,
        user_id: UUID,
        folder: Folder,
        new_parent_id: UUID | None,
        name: str | None = None,
    ) -> bool:
        """
        Re-parent in memory after the cycle, ownership and sibling-name checks.

        `name` is the name the folder will carry under the new parent when it is
        renamed in the same call. Returns False when the parent is unchanged.
        """
        if new_parent_id == folder.parent_id:
            return False

        if new_parent_id == folder.id:
            raise InvalidOperationError("Cannot move folder into itself")

        if new_parent_id is not None:
            parents = await self._load_parent_map(db, user_id)
            if new_parent_id not in parents:
                raise NotFoundError("Parent folder")
            if would_create_cycle(parents, folder.id, new_parent_id):
                raise InvalidOperationError("Cannot move folder into one of its subfolders")

        await self._check_sibling_name(
            db, user_id, new_parent_id, name or folder.name, exclude_id=folder.id,
        )
        logger.info("Moving folder %s from %s to %s", folder.id, folder.parent_id, new_parent_id)
        folder.parent_id = new_parent_id
        return True

    async def _load_parent_map(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> dict[UUID, UUID | None]:
        """
        Load id -> parent_id for every folder of the user, locking the rows.

        The lock keeps the snapshot used for the cycle check stable until commit.
        """
        result = await db.execute(
            select(Folder.id, Folder.parent_id)
            .where(Folder.user_id == user_id)
            .with_for_update(),
        )
        return {folder_id: parent_id for folder_id, parent_id in result.all()}

    async def _check_sibling_name(
        self,
        db: AsyncSession,
        user_id: UUID,
        parent_id: UUID | None,
        name: str,
        exclude_id: UUID | None = None,
    ) -> None:
        """Raise ConflictError if another folder under `parent_id` already uses `name`."""
        query = select(Folder.id).where(
            Folder.user_id == user_id,
            _parent_clause(parent_id),
            Folder.name == name,
        )
        if exclude_id is not None:
            query = query.where(Folder.id != exclude_id)
        result = await db.execute(query.limit(1))
        if result.scalar_one_or_none() is not None:
            raise ConflictError()

    async def _check_reparent_names(
        self,
        db: AsyncSession,
        user_id: UUID,
        folder: Folder,
    ) -> None:
        """Raise ConflictError if moving `folder`'s children up would duplicate a sibling name."""
        siblings = await db.execute(
            select(Folder.name).where(
                Folder.user_id == user_id,
                _parent_clause(folder.parent_id),
                Folder.id != folder.id,
            ),
        )
        children = await db.execute(
            select(Folder.name).where(Folder.user_id == user_id, Folder.parent_id == folder.id),
        )
        clashes = set(siblings.scalars()) & set(children.scalars())
        if clashes:
            raise ConflictError(
                f"Cannot move subfolder '{min(clashes)}' up: a folder with this name "
                "already exists in the parent folder",
            )

    async def _content_counts(
        self,
        db: AsyncSession,
        user_id: UUID,
        folder_id: UUID,
    ) -> tuple[int, int]:
        """Count direct child folders and resources of a folder."""
        child_count = await db.scalar(
            select(func.count())
            .select_from(Folder)
            .where(Folder.user_id == user_id, Folder.parent_id == folder_id),
        )
        resource_count = await db.scalar(
            select(func.count())
            .select_from(Resource)
            .where(Resource.user_id == user_id, Resource.folder_id == folder_id),
        )
        return child_count or 0, resource_count or 0

    async def _flush(self, db: AsyncSession) -> None:
        """Flush pending writes, translating lost-race constraint violations."""
        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            logger.warning("Folder write rejected by storage constraint: %s", e.orig)
            _raise_for_integrity_error(e)


folder_service = FolderService()
