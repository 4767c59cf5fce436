from fastapi import APIRouter, Depends
from typing import List, Optional
from ..schemas.comments import CommentIn, CommentNodeOut, CommentDetailOut, LikeOut
from ..schemas.notes import MessageOut
from ..auth import get_current_user, get_optional_user
from .. import comments

router = APIRouter()


@router.get('/detail/{comment_id}', response_model=CommentDetailOut)
async def detail(comment_id: int, current_user: Optional[dict] = Depends(get_optional_user)):
    return await comments.get_detail(comment_id, current_user)


@router.get('/{article_id}', response_model=List[CommentNodeOut])
async def tree(article_id: int, current_user: Optional[dict] = Depends(get_optional_user)):
    return await comments.build_tree(article_id, current_user)


@router.post('', response_model=CommentNodeOut)
async def post(payload: CommentIn, current_user: dict = Depends(get_current_user)):
    return await comments.post_comment(current_user, payload.article_id, payload.content, payload.parent_id)


@router.post('/{comment_id}/like', response_model=LikeOut)
async def like(comment_id: int, current_user: dict = Depends(get_current_user)):
    return await comments.toggle_like(current_user, comment_id)


@router.delete('/{comment_id}', response_model=MessageOut)
async def remove(comment_id: int, current_user: dict = Depends(get_current_user)):
    await comments.delete_comment(current_user, comment_id)
    return {'message': 'comment deleted'}
