"""
Note/tag association and the tag catalogue.
"""
from collections import defaultdict
from typing import Dict, Iterable, List, Optional
import logging
from sqlalchemy import select, delete, insert, func, or_, update
from sqlalchemy.exc import IntegrityError
from .models import session_scope
from .models.tags import Tag, note_tags
from .models.notes import Note
from .policy import is_admin
from .errors import ValidationError, ReferentialError, NotFoundError, ConflictError

logger = logging.getLogger(__name__)


async def replace_note_tags(session, note_id: int, tag_ids: Iterable[int]):
    """Replace the tag set of a note inside the caller's transaction.

    The caller commits; nothing here is flushed on its own, so a failure
    rolls back together with the note write.
    """
    wanted = list(dict.fromkeys(int(t) for t in tag_ids))
    if wanted:
        res = await session.execute(select(Tag.id).where(Tag.id.in_(wanted)))
        missing = set(wanted) - set(res.scalars().all())
        if missing:
            raise ReferentialError(f'unknown tag ids: {sorted(missing)}')
    await session.execute(delete(note_tags).where(note_tags.c.note_id == note_id))
    if wanted:
        await session.execute(insert(note_tags), [{'note_id': note_id, 'tag_id': t} for t in wanted])


async def fetch_note_tags(session, note_ids: List[int]) -> Dict[int, List[dict]]:
    """One query for the tags of all given notes."""
    by_note = defaultdict(list)
    if not note_ids:
        return by_note
    res = await session.execute(
        select(note_tags.c.note_id, Tag.id, Tag.name)
        .join(Tag, Tag.id == note_tags.c.tag_id)
        .where(note_tags.c.note_id.in_(note_ids))
        .order_by(Tag.id)
    )
    for note_id, tag_id, name in res.all():
        by_note[note_id].append({'id': tag_id, 'name': name})
    return by_note


def _article_count():
    return func.count(note_tags.c.note_id).label('article_count')


def _clean_name(name: Optional[str]) -> str:
    name = (name or '').strip()
    if not name:
        raise ValidationError('tag name is required')
    return name


async def create_tag(name: str):
    name = _clean_name(name)
    async with session_scope() as session:
        q = await session.execute(select(Tag.id).where(Tag.name == name))
        if q.first():
            raise ConflictError(f'tag {name!r} already exists')
        tag = Tag(name=name)
        session.add(tag)
        try:
            await session.commit()
        except IntegrityError:
            await session.rollback()
            raise ConflictError(f'tag {name!r} already exists')
        await session.refresh(tag)
        return {'id': tag.id, 'name': tag.name, 'article_count': 0}


async def list_tags(caller: dict):
    """Tags with their article counts.

    Admins see the whole catalogue; anyone else sees the tags on their own
    notes plus tags no note uses yet.
    """
    async with session_scope() as session:
        q = (
            select(Tag.id, Tag.name, _article_count())
            .outerjoin(note_tags, note_tags.c.tag_id == Tag.id)
            .group_by(Tag.id, Tag.name)
            .order_by(Tag.id.desc())
        )
        if not is_admin(caller):
            q = (
                q.outerjoin(Note, Note.id == note_tags.c.note_id)
                .where(or_(Note.user_id == caller['id'], note_tags.c.note_id.is_(None)))
            )
        res = await session.execute(q)
        return [dict(r._mapping) for r in res.all()]


async def hot_tags(limit: int = 10):
    async with session_scope() as session:
        count = _article_count()
        res = await session.execute(
            select(Tag.id, Tag.name, count)
            .join(note_tags, note_tags.c.tag_id == Tag.id)
            .group_by(Tag.id, Tag.name)
            .having(func.count(note_tags.c.note_id) > 0)
            .order_by(func.count(note_tags.c.note_id).desc(), Tag.id.desc())
            .limit(limit)
        )
        return [dict(r._mapping) for r in res.all()]


async def get_tag(tag_id: int):
    async with session_scope() as session:
        tag = await session.get(Tag, tag_id)
        if not tag:
            raise NotFoundError('tag not found')
        return {'id': tag.id, 'name': tag.name}


async def update_tag(tag_id: int, name: str):
    name = _clean_name(name)
    async with session_scope() as session:
        tag = await session.get(Tag, tag_id)
        if not tag:
            raise NotFoundError('tag not found')
        q = await session.execute(select(Tag.id).where(Tag.name == name, Tag.id != tag_id))
        if q.first():
            raise ConflictError(f'tag {name!r} already exists')
        await session.execute(update(Tag).where(Tag.id == tag_id).values(name=name))
        await session.commit()
        return {'id': tag_id, 'name': name}


async def delete_tag(tag_id: int):
    async with session_scope() as session:
        tag = await session.get(Tag, tag_id)
        if not tag:
            raise NotFoundError('tag not found')
        used = await session.scalar(select(func.count()).select_from(note_tags).where(note_tags.c.tag_id == tag_id))
        if used:
            raise ConflictError(f'tag is used by {used} note(s); detach it first')
        await session.delete(tag)
        await session.commit()
        logger.info(f'deleted tag {tag_id}')
