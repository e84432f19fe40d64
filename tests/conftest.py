import os

os.environ["ENV"] = "test"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.db import Base, build_session_factory, get_db
from app.main import create_app
from app.routers.utils.dependencies import (
    get_blob_storage,
    get_embedding_provider,
    get_reply_generator,
    get_vector_index,
)

pytest_plugins = [
    "tests.fixtures.fake_collaborators",
    "tests.fixtures.conversation_fixtures",
    "tests.fixtures.document_fixtures",
    "tests.fixtures.system_prompt_fixtures",
]


@pytest.fixture(scope="function")
async def engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture(scope="function")
async def db(engine):
    factory = build_session_factory(engine)
    async with factory() as session:
        yield session


@pytest.fixture(scope="function")
async def client(
    db,
    fake_embeddings,
    fake_vector_index,
    fake_blob_storage,
    reply_generator,
):
    """API client with the database and every external collaborator overridden."""
    app = create_app(testing=True)

    async def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_embedding_provider] = lambda: fake_embeddings
    app.dependency_overrides[get_vector_index] = lambda: fake_vector_index
    app.dependency_overrides[get_blob_storage] = lambda: fake_blob_storage
    app.dependency_overrides[get_reply_generator] = lambda: reply_generator

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver"
    ) as c:
        yield c
    app.dependency_overrides.clear()
