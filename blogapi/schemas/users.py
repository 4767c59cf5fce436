from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime

class RegisterIn(BaseModel):
    username: str
    email: EmailStr
    password: str
    nickname: Optional[str] = None

class TokenOut(BaseModel):
    access_token: str
    token_type: str = 'bearer'

class UserOut(BaseModel):
    id: int
    username: str
    email: EmailStr
    nickname: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None
    role: str
    status: str
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True

class IdentityOut(BaseModel):
    id: int
    username: str
    role: str
    status: str
