from fastapi import APIRouter, Depends, Form
from ..schemas.users import RegisterIn, TokenOut, UserOut, IdentityOut
from ..crud import create_user, authenticate_user
from ..auth import get_current_user
from ..errors import UnauthenticatedError

router = APIRouter()


@router.post('/register', response_model=UserOut, status_code=201)
async def register(payload: RegisterIn):
    return await create_user(payload)


@router.post('/login', response_model=TokenOut)
async def login(username: str = Form(...), password: str = Form(...)):
    token = await authenticate_user(username, password)
    if not token:
        raise UnauthenticatedError('Invalid credentials')
    return token


@router.get('/me', response_model=IdentityOut)
async def me(current_user: dict = Depends(get_current_user)):
    return current_user
