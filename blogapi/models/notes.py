from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, func
from . import Base

NOTE_DRAFT = 'draft'
NOTE_PUBLISHED = 'published'

class Note(Base):
    __tablename__ = 'notes'
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), index=True, nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default='')
    cover_image = Column(String(512), nullable=False, default='')
    is_slide = Column(Boolean, nullable=False, default=False)
    slide_order = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default=NOTE_DRAFT, index=True)
    view_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
