from datetime import date
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import psycopg
import pytest

from schooldocs.database.models import DocumentRecord
from schooldocs.database.repositories.document_repository import DocumentRepository
from schooldocs.processor.exceptions import DocumentNotFoundError, InvalidStatusTransitionError
from schooldocs.processor.models import DocumentUpdate
from schooldocs.processor.status import DocumentStatus

_GET_CONNECTION = "schooldocs.database.repositories.document_repository.get_connection"


def _make_row(**overrides: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": "7b1c0c1e-4d55-4d7c-9a1b-2f1f7c0e9a10",
        "user_id": "user-1",
        "child_id": None,
        "title": "Field trip form",
        "storage_paths": ["user-1/p1.jpg"],
        "ocr_text": None,
        "status": "processing",
        "doc_type": "Other",
        "tags": [],
        "due_date": None,
        "event_date": None,
        "teacher": None,
        "subject": None,
        "error_message": None,
        "claimed_at": None,
        "created_at": None,
    }
    row.update(overrides)
    return row


def _mock_connection(mock_get_conn: MagicMock) -> tuple[MagicMock, MagicMock]:
    """Wire up a mock async connection + cursor and return (mock_conn, mock_cursor)."""
    mock_cursor = MagicMock()
    mock_cursor.execute = AsyncMock()
    mock_cursor.fetchone = AsyncMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__aenter__.return_value = mock_cursor
    mock_conn.execute = AsyncMock()
    mock_conn.commit = AsyncMock()
    mock_conn.rollback = AsyncMock()
    mock_get_conn.return_value.__aenter__.return_value = mock_conn
    return mock_conn, mock_cursor


def _update() -> DocumentUpdate:
    return DocumentUpdate(
        doc_type="Permission Slip",
        ocr_text="Permission slip due 3/15/2024",
        tags=["permission slip"],
        due_date=date(2024, 3, 15),
    )


class TestFindById:
    @pytest.mark.asyncio
    @patch(_GET_CONNECTION)
    async def test_returns_document_when_found(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = _make_row(tags=["pta"])

        result = await DocumentRepository().find_by_id("7b1c0c1e-4d55-4d7c-9a1b-2f1f7c0e9a10")

        assert isinstance(result, DocumentRecord)
        assert result.user_id == "user-1"
        assert result.storage_paths == ["user-1/p1.jpg"]
        assert result.tags == ["pta"]
        assert result.status == "processing"

    @pytest.mark.asyncio
    @patch(_GET_CONNECTION)
    async def test_raises_document_not_found_when_missing(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        with pytest.raises(DocumentNotFoundError, match="Document missing not found"):
            await DocumentRepository().find_by_id("missing")

    @pytest.mark.asyncio
    @patch(_GET_CONNECTION)
    async def test_malformed_id_raises_document_not_found(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.execute.side_effect = psycopg.errors.InvalidTextRepresentation(
            'invalid input syntax for type uuid: "not-a-uuid"'
        )

        with pytest.raises(DocumentNotFoundError, match="Document not-a-uuid not found"):
            await DocumentRepository().find_by_id("not-a-uuid")


class TestCreate:
    @pytest.mark.asyncio
    @patch(_GET_CONNECTION)
    async def test_inserts_processing_document(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = _make_row()

        result = await DocumentRepository().create(
            user_id="user-1", title="Field trip form", storage_paths=["user-1/p1.jpg"]
        )

        assert result.status == "processing"
        sql, params = mock_cursor.execute.await_args.args
        assert "INSERT INTO documents" in sql
        assert "'processing'" in sql
        assert params[0] == "user-1"
        mock_conn.commit.assert_awaited_once()


class TestClaimNextDocument:
    @pytest.mark.asyncio
    async def test_claims_unclaimed_processing_document(self) -> None:
        mock_conn, mock_cursor = _mock_connection(MagicMock())
        mock_cursor.fetchone.return_value = _make_row()

        result = await DocumentRepository().claim_next_document(mock_conn)

        assert result is not None
        sql = mock_cursor.execute.await_args.args[0]
        assert "claimed_at IS NULL" in sql
        assert "FOR UPDATE SKIP LOCKED" in sql
        mock_conn.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_returns_none_when_nothing_to_claim(self) -> None:
        mock_conn, mock_cursor = _mock_connection(MagicMock())
        mock_cursor.fetchone.return_value = None

        assert await DocumentRepository().claim_next_document(mock_conn) is None


class TestMarkProcessed:
    @pytest.mark.asyncio
    @patch(_GET_CONNECTION)
    async def test_writes_result_guarded_by_status(self, mock_get_conn: MagicMock) -> None:
        mock_conn, _cursor = _mock_connection(mock_get_conn)
        mock_conn.execute.return_value = MagicMock(rowcount=1)

        await DocumentRepository().mark_processed("doc-1", _update())

        sql, params = mock_conn.execute.await_args.args
        assert "status = 'processed'" in sql
        assert "WHERE id = %s AND status = 'processing'" in sql
        assert params[0] == "Permission Slip"
        assert params[3] == date(2024, 3, 15)
        assert params[-1] == "doc-1"
        mock_conn.commit.assert_awaited_once()

    @pytest.mark.asyncio
    @patch(_GET_CONNECTION)
    async def test_terminal_document_raises(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_conn.execute.return_value = MagicMock(rowcount=0)
        mock_cursor.fetchone.return_value = ("failed",)

        with pytest.raises(InvalidStatusTransitionError):
            await DocumentRepository().mark_processed("doc-1", _update())

        mock_conn.commit.assert_not_awaited()

    @pytest.mark.asyncio
    @patch(_GET_CONNECTION)
    async def test_missing_document_raises(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_conn.execute.return_value = MagicMock(rowcount=0)
        mock_cursor.fetchone.return_value = None

        with pytest.raises(DocumentNotFoundError):
            await DocumentRepository().mark_processed("doc-1", _update())


class TestMarkFailed:
    @pytest.mark.asyncio
    @patch(_GET_CONNECTION)
    async def test_writes_error_message(self, mock_get_conn: MagicMock) -> None:
        mock_conn, _cursor = _mock_connection(mock_get_conn)
        mock_conn.execute.return_value = MagicMock(rowcount=1)

        await DocumentRepository().mark_failed("doc-1", "OCR processing failed")

        sql, params = mock_conn.execute.await_args.args
        assert "status = 'failed'" in sql
        assert params == ("OCR processing failed", None, "doc-1")

    @pytest.mark.asyncio
    @patch(_GET_CONNECTION)
    async def test_processed_document_cannot_fail(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_conn.execute.return_value = MagicMock(rowcount=0)
        mock_cursor.fetchone.return_value = ("processed",)

        with pytest.raises(InvalidStatusTransitionError):
            await DocumentRepository().mark_failed("doc-1", "late failure")


class TestUpdate:
    @pytest.mark.asyncio
    async def test_rejects_non_editable_columns(self) -> None:
        with pytest.raises(ValueError, match="not editable"):
            await DocumentRepository().update("doc-1", {"status": "processed"})

    @pytest.mark.asyncio
    @patch(_GET_CONNECTION)
    async def test_returns_updated_document(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = _make_row(teacher="Ms. Johnson")

        result = await DocumentRepository().update("doc-1", {"teacher": "Ms. Johnson"})

        assert result.teacher == "Ms. Johnson"
        mock_conn.commit.assert_awaited_once()

    @pytest.mark.asyncio
    @patch(_GET_CONNECTION)
    async def test_status_change_on_terminal_document_raises(
        self, mock_get_conn: MagicMock
    ) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.side_effect = [None, ("processed",)]

        with pytest.raises(InvalidStatusTransitionError):
            await DocumentRepository().update("doc-1", {}, status=DocumentStatus.FAILED)

    @pytest.mark.asyncio
    @patch(_GET_CONNECTION)
    async def test_malformed_id_raises_document_not_found(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.execute.side_effect = psycopg.errors.InvalidTextRepresentation(
            'invalid input syntax for type uuid: "not-a-uuid"'
        )

        with pytest.raises(DocumentNotFoundError):
            await DocumentRepository().update("not-a-uuid", {"teacher": "Ms. Park"})

        mock_conn.commit.assert_not_awaited()
