"""Tests for tag service layer functionality."""
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.tag import Tag
from schemas.resource import NoteCreate
from services.resource_service import resource_service
from services.tag_service import get_or_create_tags, update_resource_tags


async def test__get_or_create_tags__creates_new_tags(db_session: AsyncSession, user_id: UUID) -> None:
    tags = await get_or_create_tags(db_session, user_id, ["python", "web"])

    assert [t.name for t in tags] == ["python", "web"]
    for tag in tags:
        assert tag.user_id == user_id
        assert tag.id is not None


async def test__get_or_create_tags__reuses_existing(db_session: AsyncSession, user_id: UUID) -> None:
    first = await get_or_create_tags(db_session, user_id, ["python"])
    second = await get_or_create_tags(db_session, user_id, ["Python", "rust"])

    assert second[0].id == first[0].id
    count = await db_session.scalar(
        select(func.count()).select_from(Tag).where(Tag.user_id == user_id),
    )
    assert count == 2


async def test__get_or_create_tags__normalizes_and_deduplicates(
    db_session: AsyncSession,
    user_id: UUID,
) -> None:
    tags = await get_or_create_tags(db_session, user_id, [" React ", "react", "", "VUE"])

    assert [t.name for t in tags] == ["react", "vue"]


async def test__get_or_create_tags__empty(db_session: AsyncSession, user_id: UUID) -> None:
    assert await get_or_create_tags(db_session, user_id, []) == []
    assert await get_or_create_tags(db_session, user_id, ["  "]) == []


async def test__get_or_create_tags__per_user(
    db_session: AsyncSession,
    user_id: UUID,
    other_user_id: UUID,
) -> None:
    mine = await get_or_create_tags(db_session, user_id, ["python"])
    theirs = await get_or_create_tags(db_session, other_user_id, ["python"])

    assert mine[0].id != theirs[0].id


async def test__update_resource_tags__replaces_set(db_session: AsyncSession, user_id: UUID) -> None:
    note = await resource_service.create(
        db_session, user_id, NoteCreate(type="note", title="n", content="x", tags=["a", "b"]),
    )

    await update_resource_tags(db_session, note, ["b", "c"])
    await db_session.flush()
    await db_session.refresh(note, attribute_names=["tag_objects"])

    assert note.tags == ["b", "c"]
