import os
import uuid
from collections.abc import AsyncGenerator
from typing import Any

import psycopg
import pytest
import pytest_asyncio

from schooldocs.config.settings import Settings
from schooldocs.database.connection import close_pool, get_connection, init_pool
from schooldocs.database.models import DocumentRecord
from schooldocs.database.repositories.document_repository import DocumentRepository

DOCUMENTS_DDL = """
CREATE TABLE IF NOT EXISTS documents (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    user_id TEXT NOT NULL,
    child_id TEXT,
    title TEXT NOT NULL,
    storage_paths JSONB NOT NULL,
    ocr_text TEXT,
    status TEXT NOT NULL DEFAULT 'processing'
        CHECK (status IN ('processing', 'processed', 'failed')),
    doc_type TEXT NOT NULL DEFAULT 'Other',
    tags JSONB NOT NULL DEFAULT '[]'::jsonb,
    due_date DATE,
    event_date DATE,
    teacher TEXT,
    subject TEXT,
    error_message TEXT,
    claimed_at TIMESTAMPTZ,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""

_unavailable: str | None = None


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "schooldocs_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest_asyncio.fixture
async def integration_pool(test_settings: Settings) -> AsyncGenerator[None, None]:
    global _unavailable  # noqa: PLW0603
    if _unavailable is not None:
        pytest.skip(_unavailable)
    try:
        await init_pool(test_settings, max_size=4)
    except Exception as e:
        _unavailable = (
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a disposable database"
        )
        pytest.skip(_unavailable)
    try:
        async with get_connection() as conn:
            await conn.execute(DOCUMENTS_DDL)
            await conn.commit()
        yield
    finally:
        await close_pool()


@pytest_asyncio.fixture
async def db_conn(integration_pool: None) -> AsyncGenerator[psycopg.AsyncConnection[Any], None]:
    async with get_connection() as conn:
        yield conn


@pytest_asyncio.fixture
async def test_user_id(integration_pool: None) -> AsyncGenerator[str, None]:
    """A user id unique to the test; its documents are deleted afterwards."""
    user_id = f"it-{uuid.uuid4().hex[:12]}"
    yield user_id
    async with get_connection() as conn:
        await conn.execute("DELETE FROM documents WHERE user_id = %s", (user_id,))
        await conn.commit()


@pytest_asyncio.fixture
async def seed_document(test_user_id: str) -> DocumentRecord:
    return await DocumentRepository().create(
        user_id=test_user_id,
        title="Field trip permission slip",
        storage_paths=[f"{test_user_id}/page-1.jpg", f"{test_user_id}/page-2.jpg"],
    )
