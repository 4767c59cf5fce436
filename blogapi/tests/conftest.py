import pytest
import pytest_asyncio
import os
import sys
import tempfile
from pathlib import Path

# Point the app at a throwaway SQLite file before blogapi is imported.
# TEST_DATABASE_URL may name another async URL; it is dropped and recreated per test.
_DB_FILE = Path(tempfile.gettempdir()) / f'blogapi_test_{os.getpid()}.db'
os.environ['DATABASE_URL'] = os.getenv('TEST_DATABASE_URL', f'sqlite+aiosqlite:///{_DB_FILE}')

# Ensure the package root is on sys.path when pytest changes CWD to this tests dir
HERE = Path(__file__).resolve()
PKG_ROOT = HERE.parents[2]
if str(PKG_ROOT) not in sys.path:
    sys.path.insert(0, str(PKG_ROOT))

from httpx import AsyncClient, ASGITransport  # noqa: E402
from blogapi.main import app  # noqa: E402
from blogapi.models import Base, engine, init_models, session_scope  # noqa: E402
from blogapi.models.users import User  # noqa: E402
from blogapi.auth import create_access_token  # noqa: E402


@pytest_asyncio.fixture
async def db():
    """Fresh schema for every test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await init_models()
    yield
    await engine.dispose()


@pytest_asyncio.fixture
async def client(db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url='http://test') as ac:
        yield ac


@pytest_asyncio.fixture
async def make_user(db):
    """Insert a user directly and hand back its identity plus auth headers."""
    async def _make(username, role='subscriber', status='active', avatar=None):
        async with session_scope() as session:
            user = User(
                username=username,
                email=f'{username}@example.com',
                hashed_password='!unusable',
                role=role,
                status=status,
                avatar=avatar,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
        token = create_access_token({'id': user.id, 'username': user.username})
        return {
            'id': user.id,
            'username': username,
            'role': role,
            'status': status,
            'headers': {'Authorization': f'Bearer {token}'},
        }
    return _make


def pytest_sessionfinish(session, exitstatus):
    if _DB_FILE.exists():
        _DB_FILE.unlink()
