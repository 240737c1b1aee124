import uuid
from datetime import date
from typing import Any

import psycopg
import pytest

from schooldocs.database.models import DocumentRecord
from schooldocs.database.repositories.document_repository import DocumentRepository
from schooldocs.processor.exceptions import DocumentNotFoundError, InvalidStatusTransitionError
from schooldocs.processor.models import DocumentUpdate
from schooldocs.processor.status import DocumentStatus


def _update(**overrides: Any) -> DocumentUpdate:
    values: dict[str, Any] = {
        "doc_type": "Permission Slip",
        "ocr_text": "Field trip permission slip. Return by 3/15/2024.",
        "tags": ["permission slip", "field-trip"],
        "due_date": date(2024, 3, 15),
        "teacher": "Ms. Johnson",
    }
    values.update(overrides)
    return DocumentUpdate(**values)


@pytest.mark.integration
class TestDocumentRepositoryCreate:
    @pytest.mark.asyncio
    async def test_create_stores_processing_document(self, seed_document: DocumentRecord) -> None:
        found = await DocumentRepository().find_by_id(seed_document.id)

        assert found.status == "processing"
        assert found.doc_type == "Other"
        assert found.tags == []
        assert found.claimed_at is None
        assert found.storage_paths == seed_document.storage_paths

    @pytest.mark.asyncio
    async def test_find_by_id_raises_when_missing(self, integration_pool: None) -> None:
        with pytest.raises(DocumentNotFoundError):
            await DocumentRepository().find_by_id(str(uuid.uuid4()))


@pytest.mark.integration
class TestDocumentRepositoryClaim:
    @pytest.mark.asyncio
    async def test_document_is_claimed_once(
        self, seed_document: DocumentRecord, db_conn: psycopg.AsyncConnection[Any]
    ) -> None:
        repo = DocumentRepository()
        claimed_ids: list[str] = []
        while True:
            claimed = await repo.claim_next_document(db_conn)
            if claimed is None:
                break
            claimed_ids.append(claimed.id)

        assert claimed_ids.count(seed_document.id) == 1
        found = await repo.find_by_id(seed_document.id)
        assert found.claimed_at is not None


@pytest.mark.integration
class TestDocumentRepositoryTerminalWrites:
    @pytest.mark.asyncio
    async def test_mark_processed_persists_metadata(self, seed_document: DocumentRecord) -> None:
        repo = DocumentRepository()

        await repo.mark_processed(seed_document.id, _update())

        found = await repo.find_by_id(seed_document.id)
        assert found.status == "processed"
        assert found.doc_type == "Permission Slip"
        assert found.tags == ["permission slip", "field-trip"]
        assert found.due_date == date(2024, 3, 15)
        assert found.teacher == "Ms. Johnson"

    @pytest.mark.asyncio
    async def test_mark_failed_keeps_error_and_ocr_text(
        self, seed_document: DocumentRecord
    ) -> None:
        repo = DocumentRepository()

        await repo.mark_failed(seed_document.id, "OCR processing failed", ocr_text="partial")

        found = await repo.find_by_id(seed_document.id)
        assert found.status == "failed"
        assert found.error_message == "OCR processing failed"
        assert found.ocr_text == "partial"

    @pytest.mark.asyncio
    async def test_failed_document_never_becomes_processed(
        self, seed_document: DocumentRecord
    ) -> None:
        repo = DocumentRepository()
        await repo.mark_failed(seed_document.id, "boom")

        with pytest.raises(InvalidStatusTransitionError):
            await repo.mark_processed(seed_document.id, _update())

        found = await repo.find_by_id(seed_document.id)
        assert found.status == "failed"

    @pytest.mark.asyncio
    async def test_mark_processed_unknown_document(self, integration_pool: None) -> None:
        with pytest.raises(DocumentNotFoundError):
            await DocumentRepository().mark_processed(str(uuid.uuid4()), _update())


@pytest.mark.integration
class TestDocumentRepositoryUpdate:
    @pytest.mark.asyncio
    async def test_update_editable_fields(self, seed_document: DocumentRecord) -> None:
        updated = await DocumentRepository().update(
            seed_document.id,
            {"tags": ["pta"], "event_date": date(2024, 4, 2), "subject": "Music"},
        )

        assert updated.tags == ["pta"]
        assert updated.event_date == date(2024, 4, 2)
        assert updated.subject == "Music"
        assert updated.status == "processing"

    @pytest.mark.asyncio
    async def test_update_with_status_on_terminal_document_raises(
        self, seed_document: DocumentRecord
    ) -> None:
        repo = DocumentRepository()
        await repo.mark_processed(seed_document.id, _update())

        with pytest.raises(InvalidStatusTransitionError):
            await repo.update(seed_document.id, {}, status=DocumentStatus.FAILED)
