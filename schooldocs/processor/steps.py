from schooldocs.classification.base import BaseClassifier
from schooldocs.database.repositories.document_repository import DocumentRepository
from schooldocs.logging.logger import Log
from schooldocs.ocr.extractor import TextExtractor
from schooldocs.processor.image_urls import ImageUrlResolver
from schooldocs.processor.merger import MetadataMerger
from schooldocs.processor.pipeline import PipelineContext, PipelineStep
from schooldocs.vision.extractor import VisualSignalExtractor


class ResolveImageUrlsStep(PipelineStep):
    def __init__(self, resolver: ImageUrlResolver) -> None:
        self._resolver = resolver

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.image_urls = self._resolver.resolve_all(context.document.storage_paths)
        return context


class ExtractTextStep(PipelineStep):
    def __init__(self, text_extractor: TextExtractor) -> None:
        self._text_extractor = text_extractor

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.ocr_text = await self._text_extractor.extract_pages(context.image_urls)
        Log.info(
            f"Extracted {len(context.ocr_text)} chars from document {context.document_id} "
            f"({len(context.image_urls)} pages)"
        )
        return context

    async def aclose(self) -> None:
        await self._text_extractor.aclose()


class AnalyzeImageStep(PipelineStep):
    """Visual analysis of the first page only."""

    def __init__(self, visual_extractor: VisualSignalExtractor) -> None:
        self._visual_extractor = visual_extractor

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.image_urls:
            context.visual_signal = await self._visual_extractor.extract(context.image_urls[0])
        return context

    async def aclose(self) -> None:
        await self._visual_extractor.aclose()


class ClassifyStep(PipelineStep):
    def __init__(self, classifier: BaseClassifier) -> None:
        self._classifier = classifier

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.classification = await self._classifier.classify(
            context.ocr_text, context.visual_signal
        )
        Log.info(
            f"Classified document {context.document_id} as "
            f"{context.classification.classification.value} "
            f"({type(context.classification).__name__})"
        )
        return context


class MergeMetadataStep(PipelineStep):
    def __init__(self, merger: MetadataMerger) -> None:
        self._merger = merger

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.classification is None:
            raise ValueError("PipelineContext.classification must be set before merging")
        context.update = self._merger.merge(
            context.classification, context.visual_signal, context.ocr_text
        )
        return context


class MarkProcessedStep(PipelineStep):
    def __init__(self, doc_repo: DocumentRepository) -> None:
        self._doc_repo = doc_repo

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.update is None:
            raise ValueError("PipelineContext.update must be set before marking processed")
        await self._doc_repo.mark_processed(context.document_id, context.update)
        Log.info(f"Document {context.document_id} marked as processed")
        return context


class MarkFailedStep(PipelineStep):
    def __init__(self, doc_repo: DocumentRepository) -> None:
        self._doc_repo = doc_repo

    async def run(self, context: PipelineContext) -> PipelineContext:
        await self._doc_repo.mark_failed(
            context.document_id, context.error_message, ocr_text=context.ocr_text or None
        )
        Log.error(f"Document {context.document_id} marked as failed: {context.error_message}")
        return context
