from schooldocs.database.models import DocumentRecord
from schooldocs.logging.logger import Log
from schooldocs.processor.processor import Processor


class JobRunner:
    """Run the pipeline for one claimed document and contain its failure.

    The processor has already written the failed state; a document is never
    re-run automatically.
    """

    def __init__(self, processor: Processor) -> None:
        self._processor = processor

    async def run(self, document: DocumentRecord) -> bool:
        """Process a document. Returns True on success."""
        Log.info(f"Running pipeline for document {document.id}")
        try:
            await self._processor.process(document)
        except Exception as exc:
            Log.error(f"Document {document.id} failed: {exc}")
            return False
        Log.info(f"Document {document.id} completed successfully")
        return True
