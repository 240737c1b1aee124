class DocumentApiError(Exception):
    """Raised when a Document API call fails or returns an unusable answer."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
