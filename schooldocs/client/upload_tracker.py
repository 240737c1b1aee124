"""Client-side tracking of uploads until their document is processed.

Each upload gets a background task that polls the Document API on a fixed
schedule. Registry changes happen synchronously on the event loop and are
pushed to listeners as immutable snapshots.
"""

import asyncio
import dataclasses
import inspect
import uuid
from collections.abc import Awaitable, Callable
from typing import Any

from schooldocs.client.api_client import DocumentApiClient
from schooldocs.client.exceptions import DocumentApiError
from schooldocs.client.models import UploadProgress, UploadStatus
from schooldocs.logging.logger import Log

Listener = Callable[[list[UploadProgress]], Any]
Sleep = Callable[[float], Awaitable[None]]

UPLOAD_STARTED_PROGRESS = 10
PROCESSING_PROGRESS = 60
MAX_POLLING_PROGRESS = 95
TIMEOUT_PROGRESS = 90

PROCESSING_FAILED_ERROR = "Document processing failed"
TIMEOUT_ERROR = "Processing timeout - please check document status later"
STATUS_CHECK_ERROR = "Failed to check processing status"
NOT_FOUND_ERROR = "Document not found"
CANCELLED_ERROR = "Upload cancelled"


def _new_upload_id() -> str:
    return f"upload_{uuid.uuid4().hex[:12]}"


class UploadTracker:
    """Registry of in-flight uploads with observer notifications.

    The tracker owns api_client and closes it in aclose().
    """

    def __init__(
        self,
        api_client: DocumentApiClient,
        *,
        initial_delay_seconds: float = 2.0,
        poll_interval_seconds: float = 5.0,
        max_poll_attempts: int = 30,
        completed_eviction_seconds: float = 5.0,
        sleep: Sleep = asyncio.sleep,
        id_factory: Callable[[], str] = _new_upload_id,
    ) -> None:
        self._api = api_client
        self._initial_delay_seconds = initial_delay_seconds
        self._poll_interval_seconds = poll_interval_seconds
        self._max_poll_attempts = max_poll_attempts
        self._completed_eviction_seconds = completed_eviction_seconds
        self._sleep = sleep
        self._id_factory = id_factory
        self._uploads: dict[str, UploadProgress] = {}
        self._listeners: list[Listener] = []
        self._poll_tasks: dict[str, asyncio.Task[UploadProgress | None]] = {}
        self._background: set[asyncio.Task[Any]] = set()

    # -- observers -----------------------------------------------------

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it.

        Coroutine listeners are scheduled as tasks, never awaited inline.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def get_uploads(self) -> list[UploadProgress]:
        return list(self._uploads.values())

    # -- upload lifecycle ------------------------------------------------

    async def upload_document(
        self,
        title: str,
        storage_paths: list[str],
        *,
        user_id: str,
        child_id: str | None = None,
    ) -> str:
        """Create the document and start polling it in the background.

        Returns the upload id once the document exists.

        Raises:
            DocumentApiError: if the document could not be created. The
                entry stays in the registry as failed.
        """
        upload_id = self._id_factory()
        self._put(
            UploadProgress(
                id=upload_id, title=title, progress=0, status=UploadStatus.UPLOADING
            )
        )
        self._update(upload_id, progress=UPLOAD_STARTED_PROGRESS)
        try:
            document = await self._api.create_document(
                user_id=user_id,
                title=title,
                storage_paths=storage_paths,
                child_id=child_id,
            )
        except DocumentApiError as exc:
            Log.error(f"Upload {upload_id} failed: {exc}")
            self._update(
                upload_id,
                progress=0,
                status=UploadStatus.FAILED,
                error=str(exc) or "Upload failed",
            )
            raise

        if upload_id not in self._uploads:
            Log.info(f"Upload {upload_id} was removed before its document was created")
            return upload_id

        self._update(
            upload_id,
            progress=PROCESSING_PROGRESS,
            status=UploadStatus.PROCESSING,
            document_id=document.id,
        )
        self._poll_tasks[upload_id] = asyncio.create_task(
            self._poll_processing(upload_id, document.id)
        )
        return upload_id

    async def wait(self, upload_id: str) -> UploadProgress | None:
        """Wait for the upload's polling to end and return its final snapshot."""
        task = self._poll_tasks.get(upload_id)
        if task is not None:
            await asyncio.wait({task})
            if not task.cancelled():
                return task.result()
        return self._uploads.get(upload_id)

    def cancel(self, upload_id: str) -> bool:
        """Stop polling an upload and mark it failed. False if nothing was polling."""
        task = self._poll_tasks.pop(upload_id, None)
        if task is None or task.done():
            return False
        task.cancel()
        self._update(upload_id, status=UploadStatus.FAILED, error=CANCELLED_ERROR)
        return True

    def remove_upload(self, upload_id: str) -> None:
        task = self._poll_tasks.pop(upload_id, None)
        if task is not None:
            task.cancel()
        if self._uploads.pop(upload_id, None) is not None:
            self._notify()

    def clear_completed(self) -> None:
        completed = [
            upload_id
            for upload_id, upload in self._uploads.items()
            if upload.status is UploadStatus.COMPLETED
        ]
        for upload_id in completed:
            del self._uploads[upload_id]
        self._notify()

    async def aclose(self) -> None:
        """Cancel all polling and pending notifications, then close the API client."""
        tasks = [*self._poll_tasks.values(), *self._background]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._poll_tasks.clear()
        await self._api.aclose()

    # -- polling ---------------------------------------------------------

    async def _poll_processing(self, upload_id: str, document_id: str) -> UploadProgress | None:
        try:
            await self._sleep(self._initial_delay_seconds)
            last_error: DocumentApiError | None = None
            for attempt in range(1, self._max_poll_attempts + 1):
                last_error = None
                try:
                    document = await self._api.get_document(document_id)
                except DocumentApiError as exc:
                    if exc.status_code == 404:
                        self._update(
                            upload_id,
                            progress=PROCESSING_PROGRESS,
                            status=UploadStatus.FAILED,
                            error=NOT_FOUND_ERROR,
                        )
                        return self._uploads.get(upload_id)
                    Log.warning(f"Polling document {document_id} failed (attempt {attempt}): {exc}")
                    last_error = exc
                else:
                    if document.status == "processed":
                        self._update(upload_id, progress=100, status=UploadStatus.COMPLETED)
                        self._schedule_eviction(upload_id)
                        return self._uploads.get(upload_id)
                    if document.status == "failed":
                        self._update(
                            upload_id,
                            progress=PROCESSING_PROGRESS,
                            status=UploadStatus.FAILED,
                            error=PROCESSING_FAILED_ERROR,
                        )
                        return self._uploads.get(upload_id)
                    self._update(
                        upload_id,
                        progress=min(PROCESSING_PROGRESS + attempt * 2, MAX_POLLING_PROGRESS),
                    )
                if attempt < self._max_poll_attempts:
                    await self._sleep(self._poll_interval_seconds)

            if last_error is not None:
                self._update(
                    upload_id,
                    progress=PROCESSING_PROGRESS,
                    status=UploadStatus.FAILED,
                    error=STATUS_CHECK_ERROR,
                )
            else:
                self._update(
                    upload_id,
                    progress=TIMEOUT_PROGRESS,
                    status=UploadStatus.FAILED,
                    error=TIMEOUT_ERROR,
                )
            return self._uploads.get(upload_id)
        finally:
            if self._poll_tasks.get(upload_id) is asyncio.current_task():
                del self._poll_tasks[upload_id]

    def _schedule_eviction(self, upload_id: str) -> None:
        async def evict() -> None:
            await self._sleep(self._completed_eviction_seconds)
            if self._uploads.pop(upload_id, None) is not None:
                self._notify()

        self._track(asyncio.create_task(evict()))

    # -- registry --------------------------------------------------------

    def _put(self, upload: UploadProgress) -> None:
        self._uploads[upload.id] = upload
        self._notify()

    def _update(self, upload_id: str, **changes: Any) -> None:
        existing = self._uploads.get(upload_id)
        if existing is None:
            return
        self._put(dataclasses.replace(existing, **changes))

    def _notify(self) -> None:
        snapshot = self.get_uploads()
        for listener in list(self._listeners):
            try:
                result = listener(snapshot)
            except Exception as exc:
                Log.error(f"Upload listener raised: {exc}")
                continue
            if inspect.isawaitable(result):
                self._track(asyncio.ensure_future(result))

    def _track(self, task: asyncio.Future[Any]) -> None:
        self._background.add(task)
        task.add_done_callback(self._on_background_done)

    def _on_background_done(self, task: asyncio.Future[Any]) -> None:
        self._background.discard(task)
        if not task.cancelled() and task.exception() is not None:
            Log.error(f"Upload tracker background task failed: {task.exception()}")
