from typing import Any, NoReturn

import psycopg
from psycopg import sql
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from schooldocs.database.connection import get_connection
from schooldocs.database.models import DocumentRecord
from schooldocs.processor.exceptions import DocumentNotFoundError
from schooldocs.processor.models import DocumentUpdate
from schooldocs.processor.status import DocumentStatus, ensure_transition

_COLUMNS = """
    id, user_id, child_id, title, storage_paths, ocr_text, status, doc_type,
    tags, due_date, event_date, teacher, subject, error_message, claimed_at,
    created_at
"""

# Columns a caller may change through update().
EDITABLE_COLUMNS = frozenset(
    {
        "title",
        "child_id",
        "ocr_text",
        "doc_type",
        "tags",
        "due_date",
        "event_date",
        "teacher",
        "subject",
        "error_message",
    }
)
_JSONB_COLUMNS = frozenset({"tags", "storage_paths"})


class DocumentRepository:
    """Database operations for the documents table.

    Terminal writes only touch rows still in 'processing'; a missed write is
    reported as DocumentNotFoundError or InvalidStatusTransitionError.
    """

    async def create(
        self,
        *,
        user_id: str,
        title: str,
        storage_paths: list[str],
        child_id: str | None = None,
    ) -> DocumentRecord:
        """Insert a new document in the 'processing' state."""
        async with get_connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    f"""
                    INSERT INTO documents (user_id, child_id, title, storage_paths, status)
                    VALUES (%s, %s, %s, %s, 'processing')
                    RETURNING {_COLUMNS}
                    """,
                    (user_id, child_id, title, Jsonb(storage_paths)),
                )
                row = await cur.fetchone()
            await conn.commit()

        if row is None:
            raise RuntimeError("INSERT into documents returned no row")
        return _row_to_record(row)

    async def find_by_id(self, document_id: str) -> DocumentRecord:
        """Find a document by ID.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        try:
            async with get_connection() as conn:
                async with conn.cursor(row_factory=dict_row) as cur:
                    await cur.execute(
                        f"SELECT {_COLUMNS} FROM documents WHERE id = %s",
                        (document_id,),
                    )
                    row = await cur.fetchone()
        except psycopg.errors.DataError as exc:
            raise DocumentNotFoundError(f"Document {document_id} not found") from exc

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return _row_to_record(row)

    async def claim_next_document(
        self, conn: psycopg.AsyncConnection[Any]
    ) -> DocumentRecord | None:
        """Claim the oldest unclaimed processing document (FOR UPDATE SKIP LOCKED).

        A claimed document is never handed out again.
        """
        async with conn.cursor(row_factory=dict_row) as cur:
            await cur.execute(
                f"""
                UPDATE documents
                SET claimed_at = NOW(), updated_at = NOW()
                WHERE id = (
                    SELECT id
                    FROM documents
                    WHERE status = 'processing'
                      AND claimed_at IS NULL
                    ORDER BY created_at
                    LIMIT 1
                    FOR UPDATE SKIP LOCKED
                )
                RETURNING {_COLUMNS}
                """
            )
            row = await cur.fetchone()
        await conn.commit()

        if row is None:
            return None
        return _row_to_record(row)

    async def mark_processed(self, document_id: str, update: DocumentUpdate) -> None:
        """Write the pipeline result and move the document to 'processed'."""
        async with get_connection() as conn:
            cur = await conn.execute(
                """
                UPDATE documents
                SET status = 'processed', doc_type = %s, ocr_text = %s, tags = %s,
                    due_date = %s, event_date = %s, teacher = %s, subject = %s,
                    error_message = NULL, updated_at = NOW()
                WHERE id = %s AND status = 'processing'
                """,
                (
                    update.doc_type,
                    update.ocr_text,
                    Jsonb(update.tags),
                    update.due_date,
                    update.event_date,
                    update.teacher,
                    update.subject,
                    document_id,
                ),
            )
            if cur.rowcount == 0:
                await conn.rollback()
                await _raise_missed_write(conn, document_id, DocumentStatus.PROCESSED)
            await conn.commit()

    async def mark_failed(
        self,
        document_id: str,
        error_message: str,
        ocr_text: str | None = None,
    ) -> None:
        """Move the document to 'failed', keeping any OCR text already read."""
        async with get_connection() as conn:
            cur = await conn.execute(
                """
                UPDATE documents
                SET status = 'failed', error_message = %s,
                    ocr_text = COALESCE(%s, ocr_text), updated_at = NOW()
                WHERE id = %s AND status = 'processing'
                """,
                (error_message, ocr_text, document_id),
            )
            if cur.rowcount == 0:
                await conn.rollback()
                await _raise_missed_write(conn, document_id, DocumentStatus.FAILED)
            await conn.commit()

    async def update(
        self,
        document_id: str,
        changes: dict[str, Any],
        status: DocumentStatus | None = None,
    ) -> DocumentRecord:
        """Apply editable column changes and an optional terminal status.

        Raises:
            ValueError: if changes name a column that is not editable.
            DocumentNotFoundError: if the document does not exist.
            InvalidStatusTransitionError: if status is set and the document
                is no longer processing.
        """
        unknown = set(changes) - EDITABLE_COLUMNS
        if unknown:
            raise ValueError(f"Columns are not editable: {sorted(unknown)}")

        assignments = [
            sql.SQL("{} = %s").format(sql.Identifier(column)) for column in changes
        ]
        params: list[Any] = [
            Jsonb(value) if column in _JSONB_COLUMNS else value
            for column, value in changes.items()
        ]
        condition = sql.SQL("id = %s")
        if status is not None:
            assignments.append(sql.SQL("status = %s"))
            params.append(status.value)
            condition = sql.SQL("id = %s AND status = 'processing'")
        assignments.append(sql.SQL("updated_at = NOW()"))
        params.append(document_id)

        query = sql.SQL("UPDATE documents SET {} WHERE {} RETURNING {}").format(
            sql.SQL(", ").join(assignments), condition, sql.SQL(_COLUMNS)
        )
        try:
            async with get_connection() as conn:
                async with conn.cursor(row_factory=dict_row) as cur:
                    await cur.execute(query, params)
                    row = await cur.fetchone()
                if row is None:
                    await conn.rollback()
                    await _raise_missed_write(conn, document_id, status)
                await conn.commit()
        except psycopg.errors.DataError as exc:
            # a malformed id cannot name any document
            raise DocumentNotFoundError(f"Document {document_id} not found") from exc

        return _row_to_record(row)


async def _raise_missed_write(
    conn: psycopg.AsyncConnection[Any],
    document_id: str,
    target: DocumentStatus | None,
) -> NoReturn:
    async with conn.cursor() as cur:
        await cur.execute("SELECT status FROM documents WHERE id = %s", (document_id,))
        row = await cur.fetchone()
    if row is None:
        raise DocumentNotFoundError(f"Document {document_id} not found")
    if target is not None:
        ensure_transition(row[0], target.value)
    raise DocumentNotFoundError(f"Document {document_id} was not updated")


def _row_to_record(row: dict[str, Any]) -> DocumentRecord:
    return DocumentRecord(
        id=str(row["id"]),
        user_id=row["user_id"],
        child_id=row["child_id"],
        title=row["title"],
        storage_paths=list(row["storage_paths"] or []),
        ocr_text=row["ocr_text"],
        status=row["status"],
        doc_type=row["doc_type"],
        tags=list(row["tags"] or []),
        due_date=row["due_date"],
        event_date=row["event_date"],
        teacher=row["teacher"],
        subject=row["subject"],
        error_message=row["error_message"],
        claimed_at=row["claimed_at"],
        created_at=row["created_at"],
    )
