"""
Retro Writing - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator

import pytest
from faker import Faker
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Окружение выставляется до импорта приложения
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite://'
os.environ['JWT_SECRET'] = 'test-jwt-secret-for-testing-only'
os.environ['AUTO_CREATE_TABLES'] = 'false'
os.environ['DEBUG'] = 'false'

from retro_writing.main import app  # noqa: E402
from retro_writing.core.db import get_db  # noqa: E402
from retro_writing.db.base import Base  # noqa: E402
import retro_writing.db.models  # noqa: E402,F401
from retro_writing.client.api import DocumentApiClient  # noqa: E402
from retro_writing.domains.identity.schemas import UserCreate  # noqa: E402
from retro_writing.domains.identity.services import IdentityService  # noqa: E402

fake = Faker()

TEST_PASSWORD = 'testpassword123'


def make_username() -> str:
    """Только буквы: username допускает лишь буквы и цифры"""
    return fake.unique.pystr(min_chars=8, max_chars=12)


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Свежая in-memory база на каждый тест"""
    engine = create_async_engine(
        'sqlite+aiosqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP-клиент поверх приложения с подмененной сессией БД"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def api_client(client: AsyncClient) -> AsyncGenerator[DocumentApiClient, None]:
    """Клиент REST API, работающий с приложением без сети"""
    http_client = AsyncClient(transport=ASGITransport(app=app), base_url='http://test/api')
    api = DocumentApiClient(http_client=http_client)
    yield api
    await http_client.aclose()


def make_user_data(**overrides) -> UserCreate:
    data = {
        'username': make_username(),
        'email': fake.unique.email(),
        'password': TEST_PASSWORD,
    }
    data.update(overrides)
    return UserCreate(**data)


@pytest.fixture
async def test_user(db_session: AsyncSession):
    """Зарегистрированный пользователь и его токен"""
    return await IdentityService(db_session).register_user(make_user_data())


@pytest.fixture
async def other_user(db_session: AsyncSession):
    """Второй пользователь для проверок изоляции"""
    return await IdentityService(db_session).register_user(make_user_data())


@pytest.fixture
def auth_headers(test_user) -> dict:
    _, token = test_user
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def other_auth_headers(other_user) -> dict:
    _, token = other_user
    return {'Authorization': f'Bearer {token}'}
