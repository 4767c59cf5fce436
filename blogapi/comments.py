"""
Comment retrieval and moderation: tree/detail reads plus create, like
toggling and deletion with their ownership and content rules.
"""
import logging
from collections import deque
from typing import Optional
from sqlalchemy import select, delete, func, and_, literal
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import aliased
from .models import session_scope
from .models.comments import Comment, MAX_COMMENT_LENGTH
from .models.likes import CommentLike
from .models.notes import Note
from .models.users import User
from .comment_tree import build_comment_tree, flatten_two_levels
from .policy import ensure_owner_or_admin
from .errors import ValidationError, NotFoundError
from .core import COMMENTS_POSTED, COMMENTS_DELETED, COMMENT_LIKE_TOGGLES

logger = logging.getLogger(__name__)


def _decorated(caller: Optional[dict]):
    """Comment rows joined with author, parent author, like count and the caller's like."""
    parent = aliased(Comment)
    parent_author = aliased(User)
    like_counts = (
        select(CommentLike.comment_id, func.count(CommentLike.id).label('likes'))
        .group_by(CommentLike.comment_id)
        .subquery()
    )
    columns = [
        Comment.id, Comment.article_id, Comment.user_id, Comment.parent_id,
        Comment.content, Comment.created_at,
        User.username.label('user_name'),
        User.avatar.label('user_avatar'),
        func.coalesce(like_counts.c.likes, 0).label('likes'),
        parent_author.username.label('parent_user_name'),
    ]
    if caller:
        mine = aliased(CommentLike)
        columns.append(mine.id.isnot(None).label('is_liked'))
    else:
        columns.append(literal(False).label('is_liked'))

    stmt = (
        select(*columns)
        .outerjoin(User, User.id == Comment.user_id)
        .outerjoin(parent, parent.id == Comment.parent_id)
        .outerjoin(parent_author, parent_author.id == parent.user_id)
        .outerjoin(like_counts, like_counts.c.comment_id == Comment.id)
    )
    if caller:
        stmt = stmt.outerjoin(mine, and_(mine.comment_id == Comment.id, mine.user_id == caller['id']))
    return stmt.order_by(Comment.created_at.asc(), Comment.id.asc())


def _row(r):
    d = dict(r._mapping)
    d['likes'] = int(d['likes'] or 0)
    d['is_liked'] = bool(d['is_liked'])
    return d


async def _article_comments(session, article_id: int, caller: Optional[dict]):
    res = await session.execute(_decorated(caller).where(Comment.article_id == article_id))
    return [_row(r) for r in res.all()]


async def build_tree(article_id: int, caller: Optional[dict] = None):
    async with session_scope() as session:
        flat = await _article_comments(session, article_id, caller)
    return build_comment_tree(flat)


async def get_detail(comment_id: int, caller: Optional[dict] = None):
    """One comment plus its replies two levels deep, as a flat chronological list."""
    async with session_scope() as session:
        res = await session.execute(_decorated(caller).where(Comment.id == comment_id))
        row = res.first()
        if row is None:
            raise NotFoundError('comment not found')
        comment = _row(row)
        flat = await _article_comments(session, comment['article_id'], caller)
    return {'comment': comment, 'allReplies': flatten_two_levels(comment_id, flat)}


def _clean_content(content: Optional[str]) -> str:
    text = (content or '').strip()
    if not text:
        raise ValidationError('comment content must not be empty')
    if len(text) > MAX_COMMENT_LENGTH:
        raise ValidationError(f'comment content must be at most {MAX_COMMENT_LENGTH} characters')
    return text


async def post_comment(caller: dict, article_id: int, content: str, parent_id: Optional[int] = None):
    text = _clean_content(content)
    async with session_scope() as session:
        if parent_id is not None:
            parent = await session.get(Comment, parent_id)
            if not parent:
                raise NotFoundError('parent comment not found')
            if parent.article_id != article_id:
                raise ValidationError('parent comment belongs to another article')
        if not await session.get(Note, article_id):
            raise NotFoundError('article not found')

        comment = Comment(article_id=article_id, user_id=caller['id'], parent_id=parent_id, content=text)
        session.add(comment)
        await session.commit()

        res = await session.execute(_decorated(caller).where(Comment.id == comment.id))
        node = _row(res.first())
    node['replies'] = []
    COMMENTS_POSTED.inc()
    logger.info(f"user {caller['id']} commented {node['id']} on article {article_id}")
    return node


async def _like_count(session, comment_id: int) -> int:
    return await session.scalar(
        select(func.count(CommentLike.id)).where(CommentLike.comment_id == comment_id)
    )


async def toggle_like(caller: dict, comment_id: int):
    """Like or unlike; returns the caller's new state and the fresh count.

    Two concurrent likes by the same caller race on the unique
    (user_id, comment_id) constraint; the loser ends up "already liked".
    """
    async with session_scope() as session:
        if not await session.get(Comment, comment_id):
            raise NotFoundError('comment not found')
        mine = and_(CommentLike.user_id == caller['id'], CommentLike.comment_id == comment_id)
        existing = await session.scalar(select(CommentLike.id).where(mine))
        if existing is not None:
            await session.execute(delete(CommentLike).where(mine))
            await session.commit()
            is_liked = False
        else:
            try:
                session.add(CommentLike(user_id=caller['id'], comment_id=comment_id))
                await session.commit()
            except IntegrityError:
                await session.rollback()
                # either a concurrent like won the unique key or the comment is gone
                if await session.scalar(select(Comment.id).where(Comment.id == comment_id)) is None:
                    raise NotFoundError('comment not found')
            is_liked = True
        likes = await _like_count(session, comment_id)
    COMMENT_LIKE_TOGGLES.labels(action='like' if is_liked else 'unlike').inc()
    return {'is_liked': is_liked, 'likes': likes}


def _subtree_ids(root_id: int, edges):
    children = {}
    for cid, pid in edges:
        children.setdefault(pid, []).append(cid)
    seen = {root_id}
    queue = deque([root_id])
    while queue:
        for child in children.get(queue.popleft(), ()):
            if child not in seen:
                seen.add(child)
                queue.append(child)
    return seen


async def delete_comment(caller: dict, comment_id: int):
    """Remove a comment together with every reply beneath it and their likes."""
    async with session_scope() as session:
        comment = await session.get(Comment, comment_id)
        if not comment:
            raise NotFoundError('comment not found')
        ensure_owner_or_admin(caller, comment.user_id, 'delete this comment')

        res = await session.execute(
            select(Comment.id, Comment.parent_id).where(Comment.article_id == comment.article_id)
        )
        ids = _subtree_ids(comment_id, res.all())
        await session.execute(delete(CommentLike).where(CommentLike.comment_id.in_(sorted(ids))))
        await session.execute(delete(Comment).where(Comment.id.in_(sorted(ids))))
        await session.commit()
    COMMENTS_DELETED.inc(len(ids))
    logger.info(f"user {caller['id']} deleted comment {comment_id} ({len(ids) - 1} replies)")
