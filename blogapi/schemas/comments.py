from __future__ import annotations
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

class CommentIn(BaseModel):
    article_id: int
    content: Optional[str] = None
    parent_id: Optional[int] = None

class CommentOut(BaseModel):
    id: int
    article_id: int
    user_id: int
    parent_id: Optional[int] = None
    content: str
    created_at: Optional[datetime] = None
    user_name: Optional[str] = None
    user_avatar: Optional[str] = None
    likes: int = 0
    is_liked: bool = False
    parent_user_name: Optional[str] = None

class CommentNodeOut(CommentOut):
    replies: List[CommentNodeOut] = []

class CommentDetailOut(BaseModel):
    comment: CommentOut
    all_replies: List[CommentOut] = Field(alias='allReplies')

    class Config:
        populate_by_name = True

class LikeOut(BaseModel):
    is_liked: bool
    likes: int
