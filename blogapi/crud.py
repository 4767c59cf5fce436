from .models import session_scope
from .models.users import User, ROLE_SUBSCRIBER, STATUS_ACTIVE
from passlib.context import CryptContext
from .auth import create_access_token
from .errors import ValidationError, ConflictError
from sqlalchemy import select, or_, func
from sqlalchemy.exc import IntegrityError
import logging

logger = logging.getLogger(__name__)

pwd_ctx = CryptContext(schemes=['bcrypt'], deprecated='auto')

MIN_PASSWORD_LENGTH = 6

async def create_user(payload, role: str = ROLE_SUBSCRIBER):
    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f'password must be at least {MIN_PASSWORD_LENGTH} characters')
    async with session_scope() as session:
        q = await session.execute(select(User.id).where(or_(User.username == payload.username, User.email == payload.email)))
        if q.first():
            raise ConflictError('username or email already registered')
        user = User(
            username=payload.username,
            email=payload.email,
            hashed_password=pwd_ctx.hash(payload.password),
            nickname=payload.nickname,
            role=role,
        )
        session.add(user)
        try:
            await session.commit()
        except IntegrityError:
            # lost a race against a concurrent registration
            await session.rollback()
            raise ConflictError('username or email already registered')
        await session.refresh(user)
        logger.info(f'registered user {user.id}')
        return user

async def authenticate_user(username, password):
    """Accepts either the username or the e-mail address as login."""
    async with session_scope() as session:
        q = await session.execute(select(User).where(
            or_(User.username == username, User.email == username),
            User.status == STATUS_ACTIVE,
        ))
        user = q.scalars().first()
        if not user or not pwd_ctx.verify(password, user.hashed_password):
            return None
        user.last_login = func.now()
        await session.commit()
        access = create_access_token({'id': user.id, 'username': user.username})
        return {'access_token': access, 'token_type': 'bearer'}
