import asyncio

from schooldocs.config.settings import Settings
from schooldocs.database.connection import close_pool, init_pool
from schooldocs.database.repositories.document_repository import DocumentRepository
from schooldocs.logging.logger import Log
from schooldocs.processor.processor import build_processor
from schooldocs.worker.job_runner import JobRunner
from schooldocs.worker.worker import Worker


async def run_worker(settings: Settings) -> None:
    """Initialize pool -> build dependencies -> run the worker loop."""
    await init_pool(settings, max_size=settings.max_concurrent_documents + 1)
    processor = None
    try:
        doc_repo = DocumentRepository()
        processor = build_processor(settings, doc_repo)
        worker = Worker(doc_repo, JobRunner(processor), settings)
        await worker.run()
    finally:
        if processor is not None:
            await processor.aclose()
        await close_pool()


def main() -> None:
    """Entry point for the schooldocs-worker command."""
    settings = Settings()
    Log.configure(settings.log_level)
    try:
        asyncio.run(run_worker(settings))
    except KeyboardInterrupt:
        Log.info("Worker stopped")


if __name__ == "__main__":
    main()
