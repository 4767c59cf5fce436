"""
Note listing, lookup and mutation.

Every read path funnels through `list_notes`, which applies the central
visibility policy and enriches the page with tags in one batched query.
"""
import logging
from typing import Optional
from sqlalchemy import select, update, func, case, and_
from .models import session_scope
from .models.notes import Note, NOTE_PUBLISHED
from .models.users import User
from .models.tags import Tag, note_tags
from .models.comments import Comment
from .policy import note_visibility, can_view_note, ensure_owner_or_admin
from .tagging import replace_note_tags, fetch_note_tags
from .errors import ValidationError, NotFoundError
from .core import NOTE_VIEWS

logger = logging.getLogger(__name__)

PUBLIC_SLIDE_LIMIT = 10
DEFAULT_RECENT_LIMIT = 5
DEFAULT_POPULAR_LIMIT = 10

_ORDERINGS = {
    'recent': (Note.created_at.desc(), Note.id.desc()),
    'popular': (Note.view_count.desc(), Note.created_at.desc(), Note.id.desc()),
    'slides': (Note.slide_order.asc(), Note.created_at.desc(), Note.id.desc()),
}

_author = case(
    (and_(User.nickname.isnot(None), User.nickname != ''), User.nickname),
    else_=User.username,
).label('author')


def _note_query():
    return (
        select(Note, User.username, User.nickname, _author)
        .outerjoin(User, User.id == Note.user_id)
    )


def _serialize(row, tags):
    note = row[0]
    return {
        'id': note.id,
        'user_id': note.user_id,
        'title': note.title,
        'content': note.content,
        'cover_image': note.cover_image,
        'is_slide': note.is_slide,
        'slide_order': note.slide_order,
        'status': note.status,
        'view_count': note.view_count,
        'created_at': note.created_at,
        'username': row.username,
        'nickname': row.nickname,
        'author': row.author,
        'tags': tags.get(note.id, []),
    }


async def list_notes(
    caller: Optional[dict] = None,
    *,
    manage: bool = False,
    status: Optional[str] = None,
    is_slide: Optional[bool] = None,
    q: Optional[str] = None,
    tag: Optional[str] = None,
    tag_id: Optional[int] = None,
    order: str = 'recent',
    limit: Optional[int] = None,
):
    """Notes visible to `caller`, newest first unless `order` says otherwise.

    manage=False is the public scope (published only); manage=True is the
    management view scoped by ownership/role. Keyword and tag filters are
    case-insensitive substring matches and combine with AND.
    """
    stmt = _note_query().where(note_visibility(caller, manage))
    if status is not None:
        stmt = stmt.where(Note.status == status)
    if is_slide is not None:
        stmt = stmt.where(Note.is_slide == is_slide)
    if q and q.strip():
        term = q.strip()
        stmt = stmt.where(
            Note.title.icontains(term, autoescape=True) | Note.content.icontains(term, autoescape=True)
        )
    if tag and tag.strip():
        tagged = (
            select(note_tags.c.note_id)
            .join(Tag, Tag.id == note_tags.c.tag_id)
            .where(Tag.name.icontains(tag.strip(), autoescape=True))
        )
        stmt = stmt.where(Note.id.in_(tagged))
    if tag_id is not None:
        stmt = stmt.where(Note.id.in_(select(note_tags.c.note_id).where(note_tags.c.tag_id == tag_id)))
    stmt = stmt.order_by(*_ORDERINGS[order])
    if limit is not None:
        stmt = stmt.limit(limit)

    async with session_scope() as session:
        rows = (await session.execute(stmt)).all()
        tags = await fetch_note_tags(session, [r[0].id for r in rows])
    return [_serialize(r, tags) for r in rows]


async def published_notes():
    return await list_notes(None)


async def search_notes(q: str = '', tag: str = ''):
    return await list_notes(None, q=q, tag=tag)


async def public_slides():
    return await list_notes(None, is_slide=True, order='slides', limit=PUBLIC_SLIDE_LIMIT)


async def managed_slides(caller: dict):
    return await list_notes(caller, manage=True, is_slide=True, order='slides')


async def recent_notes(limit: int = DEFAULT_RECENT_LIMIT):
    return await list_notes(None, limit=limit)


async def popular_notes(limit: int = DEFAULT_POPULAR_LIMIT):
    return await list_notes(None, order='popular', limit=limit)


async def tag_notes(tag_id: int):
    return await list_notes(None, tag_id=tag_id)


async def get_note(note_id: int, caller: Optional[dict] = None):
    async with session_scope() as session:
        row = (await session.execute(_note_query().where(Note.id == note_id))).first()
        # drafts are indistinguishable from missing notes for outsiders
        if row is None or not can_view_note(caller, row[0]):
            raise NotFoundError('note not found')
        tags = await fetch_note_tags(session, [note_id])
    return _serialize(row, tags)


async def note_stats():
    async with session_scope() as session:
        published = Note.status == NOTE_PUBLISHED
        articles = await session.scalar(select(func.count()).select_from(Note).where(published))
        users = await session.scalar(select(func.count()).select_from(User))
        tags = await session.scalar(select(func.count()).select_from(Tag))
        comments = await session.scalar(select(func.count()).select_from(Comment))
        views = await session.scalar(select(func.coalesce(func.sum(Note.view_count), 0)).where(published))
    return {'articles': articles, 'users': users, 'tags': tags, 'comments': comments, 'views': int(views)}


async def increment_view(note_id: int):
    async with session_scope() as session:
        res = await session.execute(
            update(Note).where(Note.id == note_id).values(view_count=Note.view_count + 1)
        )
        if res.rowcount == 0:
            raise NotFoundError('note not found')
        await session.commit()
    NOTE_VIEWS.inc()


def _require_title(payload):
    if not (payload.title or '').strip():
        raise ValidationError('title is required')


async def create_note(caller: dict, payload):
    _require_title(payload)
    async with session_scope() as session:
        note = Note(
            user_id=caller['id'],
            title=payload.title,
            content=payload.content,
            cover_image=payload.cover_image,
            is_slide=payload.is_slide,
            slide_order=payload.slide_order,
            status=payload.status,
        )
        session.add(note)
        await session.flush()
        await replace_note_tags(session, note.id, payload.tag_ids)
        await session.commit()
        note_id = note.id
    logger.info(f'user {caller["id"]} created note {note_id}')
    return await get_note(note_id, caller)


async def update_note(caller: dict, note_id: int, payload):
    """Full replacement of the note's fields and tag set, in one transaction."""
    _require_title(payload)
    async with session_scope() as session:
        note = await session.get(Note, note_id)
        if not note:
            raise NotFoundError('note not found')
        ensure_owner_or_admin(caller, note.user_id, 'edit this note')
        note.title = payload.title
        note.content = payload.content
        note.cover_image = payload.cover_image
        note.is_slide = payload.is_slide
        note.slide_order = payload.slide_order
        note.status = payload.status
        await replace_note_tags(session, note_id, payload.tag_ids)
        await session.commit()
    return await get_note(note_id, caller)


async def delete_note(caller: dict, note_id: int):
    async with session_scope() as session:
        note = await session.get(Note, note_id)
        if not note:
            raise NotFoundError('note not found')
        ensure_owner_or_admin(caller, note.user_id, 'delete this note')
        # tag links and comments go with the note through ON DELETE CASCADE
        await session.delete(note)
        await session.commit()
    logger.info(f'user {caller["id"]} deleted note {note_id}')
