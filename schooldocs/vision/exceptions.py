class VisualAnalysisError(Exception):
    """Raised when the vision provider cannot analyse an image."""
