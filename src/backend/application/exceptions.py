"""Application-level exceptions.

These are business-logic errors, not HTTP errors. The presentation layer
(e.g. FastAPI routes) translates them into appropriate HTTP responses.
"""


class LoadError(ValueError):
    """Raised when one of the datasets cannot be fetched, decoded, or validated."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load {source}: {reason}")


class GenerationError(RuntimeError):
    """Raised when the generation backend is unreachable or returns an unusable reply."""


class DatasetsUnavailableError(RuntimeError):
    """Raised when a request needs the datasets but startup loading failed."""
