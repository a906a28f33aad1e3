"""Per-user resource statistics."""
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.resource import Resource, ResourceType
from schemas.resource import ResourceStatsResponse


async def get_resource_stats(db: AsyncSession, user_id: UUID) -> ResourceStatsResponse:
    """
    Count a user's resources per type, in total, and among favorites.

    Every type appears in `counts`, zero-filled, so `total == sum(counts)`.
    """
    result = await db.execute(
        select(Resource.type, func.count(Resource.id))
        .where(Resource.user_id == user_id)
        .group_by(Resource.type),
    )
    counts = dict.fromkeys(ResourceType, 0)
    for resource_type, count in result.all():
        counts[ResourceType(resource_type)] = count

    favorites_result = await db.execute(
        select(func.count(Resource.id)).where(
            Resource.user_id == user_id,
            Resource.favorite == True,  # noqa: E712
        ),
    )

    return ResourceStatsResponse(
        counts=counts,
        total=sum(counts.values()),
        favorites=favorites_result.scalar_one(),
    )
