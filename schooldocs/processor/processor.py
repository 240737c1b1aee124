from schooldocs.classification.factory import ClassifierFactory
from schooldocs.config.settings import Settings
from schooldocs.database.models import DocumentRecord
from schooldocs.database.repositories.document_repository import DocumentRepository
from schooldocs.logging.logger import Log
from schooldocs.ocr.factory import OcrClientFactory
from schooldocs.processor.image_urls import ImageUrlResolver
from schooldocs.processor.merger import MetadataMerger
from schooldocs.processor.pipeline import PipelineContext, PipelineStep
from schooldocs.processor.steps import (
    AnalyzeImageStep,
    ClassifyStep,
    ExtractTextStep,
    MarkFailedStep,
    MarkProcessedStep,
    MergeMetadataStep,
    ResolveImageUrlsStep,
)
from schooldocs.vision.factory import VisionClientFactory


class Processor:
    """Runs the pipeline steps for one claimed document.

    Pipeline: resolve urls -> OCR -> visual analysis -> classify -> merge -> processed.
    Any step failure runs failed_step and re-raises.
    """

    def __init__(self, steps: list[PipelineStep], failed_step: PipelineStep) -> None:
        self._steps = steps
        self._failed_step = failed_step

    async def process(self, document: DocumentRecord) -> PipelineContext:
        Log.info(f"Processing document {document.id} ({len(document.storage_paths)} pages)")
        context = PipelineContext(document=document)
        try:
            for step in self._steps:
                context = await step.run(context)
        except Exception as exc:
            context.error_message = str(exc) or type(exc).__name__
            await self._run_failed_step(context)
            raise
        return context

    async def aclose(self) -> None:
        for step in [*self._steps, self._failed_step]:
            await step.aclose()

    async def _run_failed_step(self, context: PipelineContext) -> None:
        try:
            await self._failed_step.run(context)
        except Exception as exc:
            Log.error(f"Could not mark document {context.document_id} as failed: {exc}")


def build_processor(settings: Settings, doc_repo: DocumentRepository | None = None) -> Processor:
    """Build a Processor with the configured provider adapters."""
    doc_repo = doc_repo or DocumentRepository()
    steps: list[PipelineStep] = [
        ResolveImageUrlsStep(
            ImageUrlResolver(settings.storage_public_base_url, settings.storage_bucket)
        ),
        ExtractTextStep(OcrClientFactory.create_extractor(settings)),
        AnalyzeImageStep(VisionClientFactory.create_extractor(settings)),
        ClassifyStep(ClassifierFactory.create(settings)),
        MergeMetadataStep(MetadataMerger()),
        MarkProcessedStep(doc_repo),
    ]
    return Processor(steps=steps, failed_step=MarkFailedStep(doc_repo))
