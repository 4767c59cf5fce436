import os
from jose import jwt, JWTError
from datetime import datetime, timedelta
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select
from .models import session_scope
from .models.users import User, STATUS_ACTIVE
from .errors import UnauthenticatedError

# Prefer JWT_SECRET but support legacy JWT_SECRET_KEY for compatibility
SECRET = os.getenv('JWT_SECRET') or os.getenv('JWT_SECRET_KEY', 'devsecret')
ALGORITHM = os.getenv('JWT_ALGORITHM', 'HS256')
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv('ACCESS_TOKEN_EXPIRE_MINUTES', str(60 * 24 * 7)))

bearer_scheme = HTTPBearer(auto_error=False)

def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({'exp': expire})
    encoded = jwt.encode(to_encode, SECRET, algorithm=ALGORITHM)
    return encoded

def decode_token(token: str):
    try:
        payload = jwt.decode(token, SECRET, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None

async def _identity_from_token(token: str):
    payload = decode_token(token)
    if not payload or 'id' not in payload:
        return None
    async with session_scope() as session:
        q = await session.execute(select(User).where(User.id == payload['id'], User.status == STATUS_ACTIVE))
        user = q.scalars().first()
    if not user:
        return None
    return {'id': user.id, 'username': user.username, 'role': user.role, 'status': user.status}

async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> dict:
    """Identity of the bearer; anonymous, expired or disabled callers are rejected."""
    if credentials is None:
        raise UnauthenticatedError('missing bearer token')
    identity = await _identity_from_token(credentials.credentials)
    if identity is None:
        raise UnauthenticatedError('invalid or expired token')
    return identity

async def get_optional_user(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)):
    # public read paths treat a bad credential the same as no credential
    if credentials is None:
        return None
    return await _identity_from_token(credentials.credentials)
