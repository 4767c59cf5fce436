from fastapi import APIRouter, Depends, Query
from typing import List
from ..schemas.tags import TagIn, TagOut, TagRef
from ..schemas.notes import NoteOut, MessageOut
from ..auth import get_current_user
from .. import tagging, notes

router = APIRouter()


@router.post('', response_model=TagOut)
async def create(payload: TagIn, current_user: dict = Depends(get_current_user)):
    return await tagging.create_tag(payload.name)


@router.get('', response_model=List[TagOut])
async def list_all(current_user: dict = Depends(get_current_user)):
    return await tagging.list_tags(current_user)


@router.get('/hot', response_model=List[TagOut])
async def hot(limit: int = Query(10, ge=1, le=100)):
    return await tagging.hot_tags(limit)


@router.get('/{tag_id}/notes', response_model=List[NoteOut])
async def tagged_notes(tag_id: int):
    return await notes.tag_notes(tag_id)


@router.get('/{tag_id}', response_model=TagRef)
async def get(tag_id: int):
    return await tagging.get_tag(tag_id)


@router.put('/{tag_id}', response_model=TagRef)
async def rename(tag_id: int, payload: TagIn, current_user: dict = Depends(get_current_user)):
    return await tagging.update_tag(tag_id, payload.name)


@router.delete('/{tag_id}', response_model=MessageOut)
async def remove(tag_id: int, current_user: dict = Depends(get_current_user)):
    await tagging.delete_tag(tag_id)
    return {'message': 'tag deleted'}
