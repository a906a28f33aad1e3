"""Service layer for tag operations."""
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.resource import Resource
from models.tag import Tag
from schemas.validators import validate_and_normalize_tags


async def get_or_create_tags(
    db: AsyncSession,
    user_id: UUID,
    tag_names: list[str],
) -> list[Tag]:
    """
    Get existing tags or create new ones.

    Args:
        db: Database session.
        user_id: User ID to scope tags.
        tag_names: List of tag names to get or create.

    Returns:
        List of Tag objects (existing or newly created).
    """
    if not tag_names:
        return []

    normalized = validate_and_normalize_tags(tag_names)
    if not normalized:
        return []

    # Fetch existing tags
    result = await db.execute(
        select(Tag).where(
            Tag.user_id == user_id,
            Tag.name.in_(normalized),
        ),
    )
    existing_tags = {tag.name: tag for tag in result.scalars()}

    # Create missing tags
    tags = []
    for name in normalized:
        if name in existing_tags:
            tags.append(existing_tags[name])
        else:
            new_tag = Tag(user_id=user_id, name=name)
            db.add(new_tag)
            tags.append(new_tag)

    await db.flush()
    return tags


async def update_resource_tags(
    db: AsyncSession,
    resource: Resource,
    tag_names: list[str],
) -> None:
    """
    Replace a resource's tags.

    Args:
        db: Database session.
        resource: The resource to update (tag_objects must be loaded).
        tag_names: New list of tag names (replaces existing tags).
    """
    resource.tag_objects = await get_or_create_tags(db, resource.user_id, tag_names)
