from fastapi import APIRouter
from .users import router as users_router
from .notes import router as notes_router
from .tags import router as tags_router
from .comments import router as comments_router

router = APIRouter()
router.include_router(users_router, prefix='/users', tags=['users'])
router.include_router(notes_router, prefix='/notes', tags=['notes'])
router.include_router(tags_router, prefix='/tags', tags=['tags'])
router.include_router(comments_router, prefix='/comments', tags=['comments'])
