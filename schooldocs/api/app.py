from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from schooldocs.api.routes import router
from schooldocs.config.settings import Settings
from schooldocs.database.connection import close_pool, init_pool
from schooldocs.database.repositories.document_repository import DocumentRepository
from schooldocs.logging.logger import Log


def create_app(
    settings: Settings | None = None,
    doc_repo: DocumentRepository | None = None,
) -> FastAPI:
    """Build the Document API.

    When doc_repo is given no connection pool is opened (tests inject a mock).
    """
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(application: FastAPI) -> AsyncIterator[None]:
        if doc_repo is not None:
            application.state.doc_repo = doc_repo
            yield
            return
        await init_pool(settings)
        application.state.doc_repo = DocumentRepository()
        Log.info(f"Document API started ({settings.app_env})")
        try:
            yield
        finally:
            await close_pool()
            Log.info("Document API stopped")

    application = FastAPI(title="schooldocs Document API", version="0.1.0", lifespan=lifespan)
    application.include_router(router)
    return application


def run() -> None:
    """Entry point for the schooldocs-api command."""
    settings = Settings()
    Log.configure(settings.log_level)
    uvicorn.run(
        create_app(settings),
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )
