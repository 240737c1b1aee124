from urllib.parse import quote

from schooldocs.processor.exceptions import UnsupportedStorageReferenceError


class ImageUrlResolver:
    """Turns page storage references into publicly reachable image URLs.

    Absolute http(s) references pass through unchanged. Anything else is a
    path inside the public storage bucket.
    """

    def __init__(self, public_base_url: str, bucket: str) -> None:
        self._public_base_url = public_base_url.rstrip("/")
        self._bucket = bucket

    def resolve(self, storage_path: str) -> str:
        reference = storage_path.strip()
        if not reference:
            raise UnsupportedStorageReferenceError("Empty storage reference")
        if reference.startswith(("http://", "https://")):
            return reference
        if not self._public_base_url:
            raise UnsupportedStorageReferenceError(
                f"Cannot resolve '{reference}': storage_public_base_url is not configured"
            )
        return (
            f"{self._public_base_url}/storage/v1/object/public/"
            f"{self._bucket}/{quote(reference.lstrip('/'))}"
        )

    def resolve_all(self, storage_paths: list[str]) -> list[str]:
        if not storage_paths:
            raise UnsupportedStorageReferenceError("Document has no page references")
        return [self.resolve(path) for path in storage_paths]
