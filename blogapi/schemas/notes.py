from pydantic import BaseModel, Field
from typing import List, Literal, Optional
from datetime import datetime
from .tags import TagRef

class NoteIn(BaseModel):
    """Create/update body. Accepts the admin panel's camelCase keys too."""
    title: Optional[str] = None
    content: str = ''
    tag_ids: List[int] = Field(default_factory=list, alias='tagIds')
    cover_image: str = Field('', alias='coverImage')
    is_slide: bool = Field(False, alias='isSlide')
    slide_order: int = Field(0, alias='slideOrder')
    status: Literal['draft', 'published'] = 'draft'

    class Config:
        populate_by_name = True

class NoteOut(BaseModel):
    id: int
    user_id: int
    title: str
    content: str
    cover_image: str
    is_slide: bool
    slide_order: int
    status: str
    view_count: int
    created_at: Optional[datetime] = None
    username: Optional[str] = None
    nickname: Optional[str] = None
    author: Optional[str] = None
    tags: List[TagRef] = []

class NoteStatsOut(BaseModel):
    articles: int
    users: int
    tags: int
    comments: int
    views: int

class MessageOut(BaseModel):
    message: str
