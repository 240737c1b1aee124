from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request, status

from schooldocs.api.schemas import CreateDocumentRequest, DocumentResponse, UpdateDocumentRequest
from schooldocs.database.repositories.document_repository import DocumentRepository
from schooldocs.logging.logger import Log
from schooldocs.processor.exceptions import DocumentNotFoundError, InvalidStatusTransitionError
from schooldocs.processor.merger import merge_tags
from schooldocs.processor.status import ensure_transition

router = APIRouter(prefix="/documents", tags=["documents"])


def get_repository(request: Request) -> DocumentRepository:
    repo = getattr(request.app.state, "doc_repo", None)
    if repo is None:
        raise HTTPException(status_code=503, detail="Document store unavailable")
    return repo


Repository = Annotated[DocumentRepository, Depends(get_repository)]


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_document(body: CreateDocumentRequest, repo: Repository) -> DocumentResponse:
    """Ingestion gateway: store the document as processing for the worker."""
    record = await repo.create(
        user_id=body.user_id,
        title=body.title,
        storage_paths=body.storage_paths,
        child_id=body.child_id,
    )
    Log.info(f"Document {record.id} created with {len(record.storage_paths)} pages")
    return DocumentResponse.model_validate(record)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(document_id: str, repo: Repository) -> DocumentResponse:
    try:
        record = await repo.find_by_id(document_id)
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return DocumentResponse.model_validate(record)


@router.patch("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: str, body: UpdateDocumentRequest, repo: Repository
) -> DocumentResponse:
    changes: dict[str, Any] = body.model_dump(exclude_unset=True)
    target = changes.pop("status", None)
    if "tags" in changes:
        changes["tags"] = merge_tags(changes["tags"] or [])
    for column in ("title", "doc_type"):
        if column in changes and changes[column] is None:
            del changes[column]
    if "doc_type" in changes:
        changes["doc_type"] = changes["doc_type"].value

    try:
        target_status = None
        if target is not None:
            current = await repo.find_by_id(document_id)
            target_status = ensure_transition(current.status, target)
        record = await repo.update(document_id, changes, status=target_status)
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidStatusTransitionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return DocumentResponse.model_validate(record)
