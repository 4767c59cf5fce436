"""
Authorization policy for notes and comments.

Every listing goes through `note_visibility`, so the "admin sees all,
everyone else sees their own" rule lives in exactly one place.
"""
from typing import Optional
from sqlalchemy import true
from .models.notes import Note, NOTE_PUBLISHED
from .models.users import ROLE_ADMIN
from .errors import ForbiddenError


def is_admin(caller: Optional[dict]) -> bool:
    return bool(caller) and caller.get('role') == ROLE_ADMIN


def note_visibility(caller: Optional[dict], manage: bool = False):
    """SQL criterion selecting the notes `caller` may list.

    Public scope (manage=False) only ever yields published notes, whoever
    asks. Management scope is unrestricted for admins and owner-only for
    everybody else.
    """
    if not manage:
        return Note.status == NOTE_PUBLISHED
    if is_admin(caller):
        return true()
    return Note.user_id == caller['id']


def can_view_note(caller: Optional[dict], note) -> bool:
    if note.status == NOTE_PUBLISHED:
        return True
    return caller is not None and (is_admin(caller) or note.user_id == caller['id'])


def ensure_owner_or_admin(caller: dict, owner_id: int, action: str):
    if caller['id'] != owner_id and not is_admin(caller):
        raise ForbiddenError(f'not allowed to {action}')
