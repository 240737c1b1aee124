from schooldocs.client.api_client import DocumentApiClient
from schooldocs.client.factory import build_upload_tracker
from schooldocs.client.models import UploadProgress, UploadStatus
from schooldocs.client.upload_tracker import UploadTracker

__all__ = [
    "DocumentApiClient",
    "UploadProgress",
    "UploadStatus",
    "UploadTracker",
    "build_upload_tracker",
]
