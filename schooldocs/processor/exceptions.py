class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class DocumentNotFoundError(ProcessorError):
    """Raised when a document cannot be found in the database."""


class InvalidStatusTransitionError(ProcessorError):
    """Raised when a status write would leave a terminal state or skip processing."""


class UnsupportedStorageReferenceError(ProcessorError):
    """Raised when a page storage reference cannot be turned into an image URL."""
