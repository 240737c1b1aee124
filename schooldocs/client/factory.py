from schooldocs.client.api_client import DocumentApiClient
from schooldocs.client.upload_tracker import UploadTracker
from schooldocs.config.settings import Settings


def build_upload_tracker(settings: Settings) -> UploadTracker:
    """Build an UploadTracker talking to the configured Document API."""
    api_client = DocumentApiClient(
        settings.document_api_base_url,
        timeout_seconds=settings.tracker_request_timeout_seconds,
    )
    return UploadTracker(
        api_client,
        initial_delay_seconds=settings.tracker_initial_delay_seconds,
        poll_interval_seconds=settings.tracker_poll_interval_seconds,
        max_poll_attempts=settings.tracker_max_poll_attempts,
        completed_eviction_seconds=settings.tracker_completed_eviction_seconds,
    )
