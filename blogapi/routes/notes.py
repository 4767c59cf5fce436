from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from ..schemas.notes import NoteIn, NoteOut, NoteStatsOut, MessageOut
from ..auth import get_current_user, get_optional_user
from .. import notes

router = APIRouter()

# static paths are declared before /{note_id} so they are not captured by it


@router.get('', response_model=List[NoteOut])
async def manage(current_user: dict = Depends(get_current_user)):
    return await notes.list_notes(current_user, manage=True)


@router.get('/published', response_model=List[NoteOut])
async def published():
    return await notes.published_notes()


@router.get('/search', response_model=List[NoteOut])
async def search(q: str = '', tag: str = ''):
    return await notes.search_notes(q, tag)


@router.get('/slides', response_model=List[NoteOut])
async def slides():
    return await notes.public_slides()


@router.get('/slides/all', response_model=List[NoteOut])
async def all_slides(current_user: dict = Depends(get_current_user)):
    return await notes.managed_slides(current_user)


@router.get('/recent', response_model=List[NoteOut])
async def recent(limit: int = Query(notes.DEFAULT_RECENT_LIMIT, ge=1, le=100)):
    return await notes.recent_notes(limit)


@router.get('/popular', response_model=List[NoteOut])
async def popular(limit: int = Query(notes.DEFAULT_POPULAR_LIMIT, ge=1, le=100)):
    return await notes.popular_notes(limit)


@router.get('/stats', response_model=NoteStatsOut)
async def stats():
    return await notes.note_stats()


@router.post('', response_model=NoteOut)
async def create(payload: NoteIn, current_user: dict = Depends(get_current_user)):
    return await notes.create_note(current_user, payload)


@router.post('/{note_id}/view', response_model=MessageOut)
async def view(note_id: int):
    await notes.increment_view(note_id)
    return {'message': 'view recorded'}


@router.get('/{note_id}', response_model=NoteOut)
async def get(note_id: int, current_user: Optional[dict] = Depends(get_optional_user)):
    return await notes.get_note(note_id, current_user)


@router.put('/{note_id}', response_model=NoteOut)
async def update(note_id: int, payload: NoteIn, current_user: dict = Depends(get_current_user)):
    return await notes.update_note(current_user, note_id, payload)


@router.delete('/{note_id}', response_model=MessageOut)
async def remove(note_id: int, current_user: dict = Depends(get_current_user)):
    await notes.delete_note(current_user, note_id)
    return {'message': 'note deleted'}
