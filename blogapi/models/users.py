from sqlalchemy import Column, Integer, String, Text, DateTime, func
from . import Base

ROLE_SUBSCRIBER = 'subscriber'
ROLE_ADMIN = 'admin'
STATUS_ACTIVE = 'active'
STATUS_DISABLED = 'disabled'

class User(Base):
    __tablename__ = 'users'
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(150), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    nickname = Column(String(150), nullable=True)
    bio = Column(Text, nullable=True)
    avatar = Column(String(255), nullable=True)
    role = Column(String(20), nullable=False, default=ROLE_SUBSCRIBER)
    status = Column(String(20), nullable=False, default=STATUS_ACTIVE)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    last_login = Column(DateTime(timezone=True), nullable=True)
