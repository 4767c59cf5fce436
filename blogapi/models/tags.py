from sqlalchemy import Table, Column, Integer, String, ForeignKey
from . import Base

class Tag(Base):
    __tablename__ = 'tags'
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)

# join rows are replaced wholesale on note update, never diffed
note_tags = Table(
    'note_tags', Base.metadata,
    Column('note_id', Integer, ForeignKey('notes.id', ondelete='CASCADE'), primary_key=True),
    Column('tag_id', Integer, ForeignKey('tags.id'), primary_key=True, index=True),
)
