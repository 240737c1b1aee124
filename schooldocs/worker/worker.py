import asyncio
from collections.abc import Awaitable, Callable

from schooldocs.config.settings import Settings
from schooldocs.database.connection import get_connection
from schooldocs.database.models import DocumentRecord
from schooldocs.database.repositories.document_repository import DocumentRepository
from schooldocs.logging.logger import Log
from schooldocs.worker.job_runner import JobRunner


class Worker:
    """Poll loop: wait for a free slot -> claim -> dispatch as a task.

    At most max_concurrent_documents pipelines run at once; each runs in
    its own task so one document's failure never affects another.
    """

    def __init__(
        self,
        doc_repo: DocumentRepository,
        job_runner: JobRunner,
        settings: Settings,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._doc_repo = doc_repo
        self._job_runner = job_runner
        self._settings = settings
        self._sleep = sleep
        self._tasks: set[asyncio.Task[bool]] = set()

    async def run(self, max_documents: int | None = None) -> None:
        """Main poll loop. Runs until cancelled.

        If max_documents is set, stop claiming after that many documents and
        wait for them to finish (for testing).
        """
        Log.info("Worker started, polling for documents")
        slots = asyncio.Semaphore(max(1, self._settings.max_concurrent_documents))
        dispatched = 0
        try:
            while max_documents is None or dispatched < max_documents:
                await slots.acquire()
                document = await self._try_claim_document()
                if document is None:
                    slots.release()
                    Log.debug("No documents available, sleeping")
                    await self._sleep(self._settings.worker_poll_interval_seconds)
                    continue
                self._dispatch(document, slots)
                dispatched += 1
        except asyncio.CancelledError:
            Log.info("Worker shutting down gracefully")
            raise
        finally:
            await self._drain()

    def _dispatch(self, document: DocumentRecord, slots: asyncio.Semaphore) -> None:
        task = asyncio.create_task(self._run_document(document, slots))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_document(self, document: DocumentRecord, slots: asyncio.Semaphore) -> bool:
        try:
            return await self._job_runner.run(document)
        finally:
            slots.release()

    async def _drain(self) -> None:
        if self._tasks:
            Log.info(f"Waiting for {len(self._tasks)} in-flight documents")
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def _try_claim_document(self) -> DocumentRecord | None:
        """Attempt to claim the next document. Gracefully handle DB errors."""
        try:
            async with get_connection() as conn:
                return await self._doc_repo.claim_next_document(conn)
        except Exception as exc:
            Log.warning(f"Database error, will retry: {exc}")
            return None
