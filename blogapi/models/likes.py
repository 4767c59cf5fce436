from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint
from . import Base

class CommentLike(Base):
    __tablename__ = 'comment_likes'
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    comment_id = Column(Integer, ForeignKey('comments.id', ondelete='CASCADE'), index=True, nullable=False)
    __table_args__ = (
        UniqueConstraint('user_id', 'comment_id', name='uix_user_comment_like'),
    )
