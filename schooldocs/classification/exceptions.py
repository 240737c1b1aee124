class ClassificationError(Exception):
    """Raised when AI classification fails."""


class ClassificationValidationError(ClassificationError):
    """Raised when the AI response is missing required fields or has the wrong shape."""


class ClassificationNetworkError(ClassificationError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
