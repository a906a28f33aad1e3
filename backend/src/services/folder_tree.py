"""
In-memory helpers for the folder adjacency list.

These operate on folders already loaded for one user so that tree building and
cycle checks never issue a query per level.
"""
from collections.abc import Iterable, Iterator, Mapping
from uuid import UUID

from models.folder import Folder
from schemas.folder import FolderTreeNode


def build_tree(folders: Iterable[Folder]) -> list[FolderTreeNode]:
    """
    Assemble a nested tree from a flat folder sequence in two passes.

    The first pass maps id -> node; the second appends each node to its parent's
    children (or to the root list when parent_id is None). Sibling order follows
    the order of `folders`. A folder whose parent is not in the input is dropped.
    """
    ordered = list(folders)
    nodes: dict[UUID, FolderTreeNode] = {
        folder.id: FolderTreeNode.model_validate(folder) for folder in ordered
    }

    roots: list[FolderTreeNode] = []
    for folder in ordered:
        node = nodes[folder.id]
        if folder.parent_id is None:
            roots.append(node)
        elif folder.parent_id in nodes:
            nodes[folder.parent_id].children.append(node)
    return roots


def iter_ancestor_ids(
    parents: Mapping[UUID, UUID | None],
    folder_id: UUID,
) -> Iterator[UUID]:
    """
    Yield the ids above `folder_id`, nearest first, up to the root.

    Stops if the chain revisits a folder, so a corrupt parent chain cannot loop.
    """
    seen = {folder_id}
    current = parents.get(folder_id)
    while current is not None and current not in seen:
        yield current
        seen.add(current)
        current = parents.get(current)


def would_create_cycle(
    parents: Mapping[UUID, UUID | None],
    folder_id: UUID,
    new_parent_id: UUID | None,
) -> bool:
    """
    Check whether re-parenting `folder_id` under `new_parent_id` would close a loop.

    True when the new parent is the folder itself or one of its descendants, i.e.
    when `folder_id` appears on the ancestor chain of `new_parent_id`.
    """
    if new_parent_id is None:
        return False
    if new_parent_id == folder_id:
        return True
    return folder_id in iter_ancestor_ids(parents, new_parent_id)
